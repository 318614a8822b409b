# fba/cli.py

"""
fba 명령줄 도구 (typer).

    fba                 API 서버 실행 (uvicorn)
    fba migrate         대기 중인 마이그레이션 적용 후 종료
    fba create-admin    슈퍼유저 계정 생성
"""

import asyncio
from typing import Optional

import typer
import uvicorn
from pydantic import ValidationError

from fba.core.config import get_settings
from fba.core.database import build_engine, build_session_factory, run_migrations
from fba.core.exceptions import AppError
from fba.core.log import setup_logging
from fba.plugins.system import crud as sys_crud
from fba.plugins.system import schemas as sys_schemas

cli = typer.Typer(help="FBA admin back-office API")


@cli.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    host: str = typer.Option("0.0.0.0", "--host", help="바인딩 주소"),
    port: int = typer.Option(8000, "--port", help="바인딩 포트"),
    reload: bool = typer.Option(False, "--reload", help="코드 변경 시 자동 재시작 (개발용)"),
):
    """하위 명령 없이 실행하면 API 서버를 띄웁니다."""
    if ctx.invoked_subcommand is not None:
        return
    uvicorn.run("fba.main:create_app", factory=True, host=host, port=port, reload=reload, log_config=None)


@cli.command()
def migrate(revision: str = typer.Argument("head", help="적용할 대상 리비전")):
    """대기 중인 데이터베이스 마이그레이션을 적용합니다."""
    settings = get_settings()
    setup_logging(settings)
    run_migrations(settings, revision)
    typer.echo(f"마이그레이션 완료: {revision}")


async def create_admin_user(user_in: sys_schemas.UserCreate) -> None:
    settings = get_settings()
    engine = build_engine(settings)
    try:
        async with build_session_factory(engine)() as db:
            if await sys_crud.user.find_by_username(db, username=user_in.username):
                typer.echo(f"오류: 이미 존재하는 사용자명입니다: {user_in.username}", err=True)
                raise typer.Exit(code=1)
            await sys_crud.user.create(db, obj_in=user_in)
    finally:
        await engine.dispose()


@cli.command("create-admin")
def create_admin(
    username: str = typer.Option(..., "--username", "-u", prompt="관리자 사용자명(ID)을 입력하세요"),
    password: str = typer.Option(
        ..., "--password", "-p",
        prompt="관리자 비밀번호를 입력하세요", hide_input=True, confirmation_prompt=True,
    ),
    nickname: Optional[str] = typer.Option(None, "--nickname", "-n", help="표시 이름 (기본값: 사용자명)"),
    email: Optional[str] = typer.Option(None, "--email", "-e"),
):
    """슈퍼유저(권한 검사 우회) 계정을 생성합니다."""
    try:
        user_in = sys_schemas.UserCreate(
            username=username, password=password, nickname=nickname, email=email, is_super=True,
        )
    except ValidationError as e:
        for error in e.errors():
            typer.echo(f"오류: {error['msg']}", err=True)
        raise typer.Abort()

    try:
        asyncio.run(create_admin_user(user_in))
    except AppError as e:
        typer.echo(f"오류: {e.message}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"관리자 계정이 생성되었습니다: {username}")


if __name__ == "__main__":
    cli()
