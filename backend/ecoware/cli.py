import sys
from pathlib import Path

from ecoware.core.errors import EcoWareError
from ecoware.services.forecast import run_demand_forecast
from ecoware.services.history import build_series
from ecoware.services.ingest import SAMPLE_CSV, parse_movement_csv

USAGE = (
    "Usage: python -m ecoware.cli sample\n"
    "       python -m ecoware.cli forecast <csv_path> <item_name> [horizon_days]\n"
    "       python -m ecoware.cli serve [host] [port]"
)


def _forecast(args: list[str]) -> int:
    if len(args) < 2:
        print(USAGE)
        return 2

    csv_path, item_name = Path(args[0]), args[1]
    horizon = int(args[2]) if len(args) > 2 else 30

    try:
        records = parse_movement_csv(csv_path.read_text(encoding="utf-8-sig"))
        result = run_demand_forecast(build_series(records, item_name), horizon)
    except EcoWareError as exc:
        print(f"Error: {exc}")
        return 1

    print(f"Forecast for {item_name} ({result.history_points_used} historical point(s)):")
    for point, cumulative in zip(result.points, result.cumulative()):
        print(f"{point.date.isoformat()}  {point.quantity:>6} units  (cumulative {cumulative})")
    print(f"Average daily demand: {result.average_daily_demand} units")
    return 0


def _serve(args: list[str]) -> int:
    import uvicorn

    host = args[0] if args else "127.0.0.1"
    port = int(args[1]) if len(args) > 1 else 8000
    uvicorn.run("ecoware.main:app", host=host, port=port)
    return 0


def main() -> None:
    command = sys.argv[1] if len(sys.argv) > 1 else None

    if command == "sample":
        print(SAMPLE_CSV)
        return

    if command == "forecast":
        sys.exit(_forecast(sys.argv[2:]))

    if command == "serve":
        sys.exit(_serve(sys.argv[2:]))

    print(USAGE)


if __name__ == "__main__":
    main()
