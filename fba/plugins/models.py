# fba/plugins/models.py

"""
모든 플러그인 모델을 SQLModel.metadata 에 등록하기 위한 모듈입니다.
alembic env.py 와 create_db_and_tables 가 임포트합니다.
"""

from fba.plugins.code_generator.models import GenBusiness, GenColumn  # noqa: F401
from fba.plugins.config.models import Config  # noqa: F401
from fba.plugins.data_scope.models import DataRule, DataScope, DataScopeRule, RoleDataScope  # noqa: F401
from fba.plugins.dict.models import DictData, DictType  # noqa: F401
from fba.plugins.email.models import EmailRecord  # noqa: F401
from fba.plugins.file.models import FileInfo  # noqa: F401
from fba.plugins.log.models import AccessLog, LoginLog, OperaLog  # noqa: F401
from fba.plugins.menu.models import Menu, RoleMenu  # noqa: F401
from fba.plugins.notice.models import Notice  # noqa: F401
from fba.plugins.oauth2.models import OAuthUserBind  # noqa: F401
from fba.plugins.schedule.models import ScheduleJob  # noqa: F401
from fba.plugins.system.models import Dept, Permission, Role, RolePermission, User, UserRole  # noqa: F401
