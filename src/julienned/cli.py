"""Command-line interface for Julienned."""

from __future__ import annotations

import json
from datetime import date, timedelta
from typing import Optional

import typer

from julienned.config import get_settings
from julienned.db.users import get_or_create_user, get_user_by_token
from julienned.ingredients.categories import make_classifier
from julienned.ingredients.parser import parse_ingredient
from julienned.logging_utils import log_context
from julienned.shopping.service import ShoppingListService
from julienned.shopping.weeks import week_bounds

app = typer.Typer(help="Julienned recipe and shopping list commands.")


def _parse_date(value: Optional[str], option: str) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"{option} must be an ISO date (YYYY-MM-DD)") from exc


@app.command("register-user")
def register_user(
    token: str = typer.Option(..., "--token", help="Identity token of the user."),
    email: str = typer.Option(..., "--email", help="Email address."),
    name: Optional[str] = typer.Option(None, "--name", help="Display name."),
) -> None:
    """Create (or refresh) a user account for an identity token."""

    user = get_or_create_user(token_identifier=token, email=email, name=name)
    typer.echo(json.dumps(user.model_dump(mode="json")))


@app.command("generate-list")
def generate_list(
    user_token: str = typer.Option(..., "--user", help="Identity token of the list owner."),
    start: Optional[str] = typer.Option(None, "--start", help="First day (defaults to this week)."),
    end: Optional[str] = typer.Option(None, "--end", help="Last day (defaults to start + 6 days)."),
    text: bool = typer.Option(False, "--text", help="Print shareable text instead of JSON."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """
    Generate the shopping list for the meals planned in a date range.
    """

    settings = get_settings()
    user = get_user_by_token(user_token)
    if user is None:
        typer.secho(f"Unknown user token: {user_token}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    start_date = _parse_date(start, "--start")
    end_date = _parse_date(end, "--end")
    if start_date is None:
        start_date, default_end = week_bounds(date.today(), settings.week_starts_on)
    else:
        default_end = start_date + timedelta(days=6)
    end_date = end_date or default_end
    if end_date < start_date:
        raise typer.BadParameter("--end must not be before --start")

    service = ShoppingListService(
        classifier=make_classifier(include_canned=settings.enable_canned_category)
    )
    with log_context(user_id=user.id):
        if text:
            typer.echo(service.export_text(user.id, start_date, end_date))
            return
        generated = service.generate_from_meal_plans(user.id, start_date, end_date)

    payload = generated.model_dump(mode="json")
    if pretty:
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
    else:
        typer.echo(json.dumps(payload))


@app.command()
def classify(
    ingredient: str = typer.Argument(..., help="Ingredient name to classify."),
    canned: Optional[bool] = typer.Option(
        None, "--canned/--no-canned", help="Override the canned category setting."
    ),
) -> None:
    """Print the shopping category of an ingredient."""

    include_canned = get_settings().enable_canned_category if canned is None else canned
    typer.echo(make_classifier(include_canned=include_canned)(ingredient).value)


@app.command("parse-ingredient")
def parse_ingredient_command(
    line: str = typer.Argument(..., help='Ingredient line, e.g. "2 cups flour, sifted".'),
) -> None:
    """Parse a free-text ingredient line into structured fields."""

    classifier = make_classifier(include_canned=get_settings().enable_canned_category)
    parsed = parse_ingredient(line, classifier=classifier)
    typer.echo(json.dumps(parsed.model_dump(exclude_none=True)))


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address."),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes."),
) -> None:
    """Run the HTTP API."""

    from julienned.server.run import serve as run_server

    run_server(host=host, port=port, reload=reload)


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for `python -m julienned`."""
    app(prog_name="julienned", args=argv)


if __name__ == "__main__":
    main()
