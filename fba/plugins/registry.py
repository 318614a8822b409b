# fba/plugins/registry.py

"""
호스트에 등록되는 플러그인 목록입니다. 목록 순서가 곧 조립(마운트) 순서입니다.
"""

from typing import Dict, Iterable, List, Optional

from fba.core.composer import PluginCompositionError
from fba.core.plugin import Plugin
from fba.plugins.auth import AuthPlugin
from fba.plugins.code_generator import CodeGeneratorPlugin
from fba.plugins.config import ConfigPlugin
from fba.plugins.data_scope import DataScopePlugin
from fba.plugins.dict import DictPlugin
from fba.plugins.email import EmailPlugin
from fba.plugins.file import FilePlugin
from fba.plugins.log import LogPlugin
from fba.plugins.menu import MenuPlugin
from fba.plugins.monitor import MonitorPlugin
from fba.plugins.notice import NoticePlugin
from fba.plugins.oauth2 import OAuth2Plugin
from fba.plugins.schedule import SchedulePlugin
from fba.plugins.system import SystemPlugin


def all_plugins() -> List[Plugin]:
    return [
        SystemPlugin(),
        AuthPlugin(),
        MenuPlugin(),
        DataScopePlugin(),
        LogPlugin(),
        FilePlugin(),
        NoticePlugin(),
        ConfigPlugin(),
        DictPlugin(),
        EmailPlugin(),
        OAuth2Plugin(),
        CodeGeneratorPlugin(),
        SchedulePlugin(),
        MonitorPlugin(),
    ]


def default_plugins(enabled: Optional[Iterable[str]] = None) -> List[Plugin]:
    """
    enabled 가 None 이면 모든 플러그인을, 아니면 이름이 포함된 플러그인만 등록 순서대로 돌려줍니다.
    알 수 없는 이름은 기동 오류입니다.
    """
    plugins = all_plugins()
    if enabled is None:
        return plugins
    names = list(enabled)
    by_name: Dict[str, Plugin] = {plugin.name: plugin for plugin in plugins}
    unknown = [name for name in names if name not in by_name]
    if unknown:
        raise PluginCompositionError(f"unknown plugin(s) in ENABLED_PLUGINS: {', '.join(unknown)}")
    return [plugin for plugin in plugins if plugin.name in names]
