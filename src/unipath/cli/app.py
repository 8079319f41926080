from __future__ import annotations

import json
from pathlib import Path

import typer
import uvicorn

from unipath.api.app import create_app
from unipath.config import get_settings
from unipath.core.extractor import extract
from unipath.core.normalizer import project_for_client
from unipath.core.pdf_text import PdfProcessingError, extract_pdf_text
from unipath.core.security import hash_password, resolve_role
from unipath.db.init import init_database
from unipath.db.repositories import DuplicateEmailError, Repository
from unipath.db.session import SessionLocal
from unipath.logging_config import configure_logging

app = typer.Typer(help="unipath CLI")
accounts_app = typer.Typer(help="Manage accounts")
profile_app = typer.Typer(help="Applicant profiles and PDF extraction")
universities_app = typer.Typer(help="University catalog")

app.add_typer(accounts_app, name="accounts")
app.add_typer(profile_app, name="profile")
app.add_typer(universities_app, name="universities")

_INITIALIZED = False


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    init_database()
    _INITIALIZED = True


@app.command("init")
def init_cmd() -> None:
    """Create data directories and database tables."""
    configure_logging()
    result = init_database()
    typer.echo(json.dumps({"ok": True, **result}, indent=2))


@accounts_app.command("create")
def accounts_create(
    name: str = typer.Option(..., "--name"),
    email: str = typer.Option(..., "--email"),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
    role: str = typer.Option("", "--role"),
) -> None:
    configure_logging()
    ensure_initialized()
    try:
        resolved = resolve_role(role, get_settings().default_role)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    with SessionLocal() as db:
        try:
            account = Repository(db).create_account(
                name=name, email=email, password_hash=hash_password(password), role=resolved
            )
        except DuplicateEmailError as exc:
            raise typer.BadParameter(str(exc)) from exc
        typer.echo(json.dumps({"id": account.id, "email": account.email, "role": account.role}, indent=2))


@accounts_app.command("list")
def accounts_list() -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        rows = Repository(db).list_accounts()
        typer.echo(
            json.dumps(
                [{"id": row.id, "name": row.name, "email": row.email, "role": row.role} for row in rows],
                indent=2,
            )
        )


@profile_app.command("extract")
def profile_extract(file: Path = typer.Option(..., "--file", exists=True, readable=True)) -> None:
    """Print the fields a PDF (or its already-recovered .txt) would yield."""
    configure_logging()
    if file.suffix.lower() == ".pdf":
        try:
            raw_text = extract_pdf_text(file)
        except PdfProcessingError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1) from exc
    else:
        raw_text = file.read_text(encoding="utf-8")

    candidate = extract(raw_text)
    typer.echo(json.dumps(candidate.model_dump(by_alias=True), indent=2))


@profile_app.command("show")
def profile_show(email: str = typer.Option(..., "--email")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        repo = Repository(db)
        account = repo.get_account_by_email(email)
        if not account:
            raise typer.BadParameter(f"account {email} not found")
        profile = repo.get_applicant_profile(account.id)
        typer.echo(json.dumps(project_for_client(profile), indent=2))


@universities_app.command("list")
def universities_list() -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        rows = Repository(db).list_universities()
        typer.echo(
            json.dumps(
                [
                    {
                        "id": row.id,
                        "name": row.name,
                        "country": row.country,
                        "city": row.city,
                        "course_name": row.course_name,
                        "course_level": row.course_level,
                        "tags": row.tags_json,
                    }
                    for row in rows
                ],
                indent=2,
            )
        )


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    configure_logging()
    ensure_initialized()
    settings = get_settings()
    uvicorn.run(create_app(), host=host or settings.app_host, port=port or settings.app_port)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
