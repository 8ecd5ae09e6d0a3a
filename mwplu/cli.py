from __future__ import annotations

import uuid

import typer

from .config import settings
from .db.session import SessionLocal, is_configured
from .services.auth import AuthService, AuthUser
from .services.publisher import publish_due_articles
from .services.taxonomy import seed_blog_taxonomy

app = typer.Typer(help="MWPLU administrative CLI")


def _require_database() -> None:
    if not is_configured():
        typer.echo("DATABASE_URL is not set", err=True)
        raise typer.Exit(code=1)


@app.command()
def seed_taxonomy() -> None:
    """Insert or refresh the default blog categories and tags."""
    _require_database()
    db = SessionLocal()
    try:
        counts = seed_blog_taxonomy(db)
        typer.echo(f"Seeded {counts['categories']} categories and {counts['tags']} tags")
    finally:
        db.close()


@app.command()
def publish_due() -> None:
    """Publish scheduled articles whose time has come."""
    _require_database()
    db = SessionLocal()
    try:
        published = publish_due_articles(db)
        db.commit()
        typer.echo(f"Published {len(published)} article(s)")
    finally:
        db.close()


@app.command()
def issue_token(
    email: str = typer.Argument(..., help="User email"),
    user_id: str = typer.Option("", "--user-id", "-u", help="Existing user UUID; a new one is generated if omitted"),
    full_name: str = typer.Option("", "--full-name", "-f", help="Optional full name"),
) -> None:
    """Mint an access token for local testing."""
    try:
        user_uuid = uuid.UUID(user_id) if user_id else uuid.uuid4()
    except ValueError:
        typer.echo(f"Invalid user id: {user_id}", err=True)
        raise typer.Exit(code=1)

    metadata = {"full_name": full_name} if full_name else {}
    user = AuthUser(id=user_uuid, email=email.strip().lower(), user_metadata=metadata)
    token = AuthService().issue_token(user)

    typer.echo(f"User: {user.email} ({user.id})")
    typer.echo(f"Valid for {settings.auth_token_ttl_hours} hours")
    typer.echo("\nSend it as a bearer token or set this cookie:")
    typer.echo(f"{settings.cookie_name}={token}")


if __name__ == "__main__":
    app()
