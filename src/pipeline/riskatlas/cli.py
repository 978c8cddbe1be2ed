"""Command-line interface for RiskAtlas."""

import json
import logging
import sys
from pathlib import Path

import click
import structlog

from riskatlas.assistant.responder import RuleBasedResponder
from riskatlas.catalog.disasters import DisasterKind, describe_event, get_events, list_disasters
from riskatlas.config import get_config, reload_config
from riskatlas.geo_utils import Coordinate, SelectedLocation, validate_coordinate
from riskatlas.geocode.client import GeocodingError, NominatimClient
from riskatlas.risk.profiles import RuleTableError, check_rule_table, get_resolver
from riskatlas.risk.proximity import distance_km, find_nearby_events
from riskatlas.session import MapSession, format_location_report

# Configure structlog for CLI output
logging.basicConfig(format="%(message)s", level=logging.WARNING)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(colors=True),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger()

EXIT_WORDS = {"exit", "quit", "q"}


class CoordinateParam(click.ParamType):
    """A ``lat,lon`` pair validated to WGS84 range."""

    name = "lat,lon"

    def convert(self, value, param, ctx) -> Coordinate:
        if isinstance(value, Coordinate):
            return value
        try:
            lat, lon = (float(part) for part in str(value).split(","))
            return validate_coordinate(lat, lon)
        except ValueError as e:
            self.fail(f"{value!r} is not a valid lat,lon pair ({e})", param, ctx)


COORDINATE = CoordinateParam()


def _optional_location(place: str | None, lat: float | None, lon: float | None) -> SelectedLocation | None:
    """Build a selection from CLI options; all or none must be given."""
    if place is None and lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise click.UsageError("--lat and --lon must be given together")
    return SelectedLocation(coordinate=validate_coordinate(lat, lon), display_name=place or "Selected Location")


@click.group()
@click.option("--config-dir", type=click.Path(exists=True, path_type=Path), help="Configuration directory")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, config_dir: Path | None, verbose: bool) -> None:
    """RiskAtlas disaster-risk explorer for the Philippines."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    if config_dir:
        reload_config(config_dir)

    try:
        check_rule_table(get_config().profiles.rules_path)
    except RuleTableError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        click.echo("Configuration loaded", err=True)


@cli.command()
@click.argument("point_a", type=COORDINATE)
@click.argument("point_b", type=COORDINATE)
def distance(point_a: Coordinate, point_b: Coordinate) -> None:
    """Great-circle distance in km between two lat,lon points."""
    click.echo(f"{distance_km(point_a, point_b):.1f} km")


@cli.command()
@click.argument("name")
@click.option("--lat", type=float, required=True, help="Latitude in degrees")
@click.option("--lon", type=float, required=True, help="Longitude in degrees")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def profile(name: str, lat: float, lon: float, as_json: bool) -> None:
    """Show the risk profile for a named location."""
    try:
        location = SelectedLocation(coordinate=validate_coordinate(lat, lon), display_name=name)
        result = get_resolver().resolve(location.display_name, location.coordinate)

        if as_json:
            data = {"name": name, "lat": location.lat, "lon": location.lon, **result.to_dict()}
            click.echo(json.dumps(data, indent=2, ensure_ascii=False))
        else:
            click.echo(format_location_report(location, result))

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("utterance")
@click.option("--place", help="Name of the selected location")
@click.option("--lat", type=float, help="Latitude of the selected location")
@click.option("--lon", type=float, help="Longitude of the selected location")
def ask(utterance: str, place: str | None, lat: float | None, lon: float | None) -> None:
    """Ask the assistant a question, optionally about a selected location."""
    try:
        location = _optional_location(place, lat, lon)
        responder = RuleBasedResponder(
            resolver=get_resolver(),
            assistant_name=get_config().assistant.name,
        )
        click.echo(responder.respond(utterance, location))

    except click.UsageError:
        raise
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--kind",
    type=click.Choice([k.value for k in DisasterKind]),
    default=DisasterKind.VOLCANOES.value,
    help="Which catalog to list",
)
@click.option("--lat", type=float, help="Latitude of the selected location")
@click.option("--lon", type=float, help="Longitude of the selected location")
@click.option("--within", type=float, help="Only events within this many km, nearest first")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def disasters(kind: str, lat: float | None, lon: float | None, within: float | None, as_json: bool) -> None:
    """List volcanoes or earthquakes with distances from a location."""
    try:
        location = _optional_location(None, lat, lon)
        origin = location.coordinate if location else None

        if within is not None:
            if origin is None:
                raise click.UsageError("--within requires --lat and --lon")
            items = find_nearby_events(origin, get_events(kind), max_distance_km=within)
        else:
            items = list_disasters(kind, origin)

        if as_json:
            data = [{**item.event.to_dict(), "distance_km": item.distance_km} for item in items]
            click.echo(json.dumps(data, indent=2))
            return

        if not items:
            click.echo("No events found")
            return

        for item in items:
            lines = describe_event(item)
            click.echo(lines[0])
            for line in lines[1:]:
                click.echo(f"  {line}")
            click.echo("")

    except click.UsageError:
        raise
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("query")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search(query: str, as_json: bool) -> None:
    """Geocode a place and show its risk profile."""
    try:
        with NominatimClient() as geocoder:
            location = geocoder.search(query)

        if location is None:
            click.echo("Location not found. Please try a different search term.", err=True)
            sys.exit(1)

        result = get_resolver().resolve(location.display_name, location.coordinate)
        if as_json:
            data = {"name": location.display_name, "lat": location.lat, "lon": location.lon, **result.to_dict()}
            click.echo(json.dumps(data, indent=2, ensure_ascii=False))
        else:
            click.echo(format_location_report(location, result))

    except GeocodingError as e:
        logger.warning("Search failed", query=query, error=str(e))
        click.echo("Search failed. Please try again.", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
def chat() -> None:
    """Interactive session: select places and talk to the assistant.

    \b
    Commands:
      /search <place>       select a place by name
      /click <lat> <lon>    select a coordinate
      /layer <name>         toggle 3d, satellite, hazards, weather or overlay
      /disasters [kind]     list volcanoes or earthquakes
      /report               show the current location panel
      quit                  leave
    """
    config = get_config()
    session = MapSession(
        resolver=get_resolver(),
        responder=RuleBasedResponder(resolver=get_resolver(), assistant_name=config.assistant.name),
    )

    click.echo("Ask about a location, or type /search <place> to start. 'quit' to leave.\n")

    with NominatimClient() as geocoder:
        while True:
            line = click.prompt("You", default="", show_default=False).strip()
            if not line:
                continue
            if line.lower() in EXIT_WORDS:
                break

            try:
                reply = _handle_chat_line(session, geocoder, line)
            except KeyError as e:
                reply = f"Error: {e.args[0]}"
            except (GeocodingError, ValueError) as e:
                reply = f"Error: {e}"

            click.echo(f"\n{config.assistant.name}:\n{reply}\n")


def _handle_chat_line(session: MapSession, geocoder: NominatimClient, line: str) -> str:
    """Run a chat command or forward plain text to the assistant."""
    if not line.startswith("/"):
        return session.ask(line)

    command, _, rest = line[1:].partition(" ")
    command = command.lower()
    rest = rest.strip()

    if command == "search":
        location = session.select_from_search(rest, geocoder)
        if location is None:
            return "Location not found. Please try a different search term."
        return session.location_report()

    if command == "click":
        parts = rest.replace(",", " ").split()
        if len(parts) != 2:
            return "Usage: /click <lat> <lon>"
        session.select_from_click(float(parts[0]), float(parts[1]), geocoder)
        return session.location_report()

    if command == "layer":
        return session.toggle_layer(rest)

    if command == "disasters":
        items = session.disasters(rest or DisasterKind.VOLCANOES)
        return "\n\n".join("\n".join(describe_event(item)) for item in items)

    if command == "report":
        return session.location_report() or "No location selected yet."

    return f"Unknown command '/{command}'"


if __name__ == "__main__":
    cli()
