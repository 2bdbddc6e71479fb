from ebb_forecast.dates import dates_between

from app import create_app
from app.db import upsert_log


def main() -> None:
    periods = [
        ("2025-07-07", "2025-07-11"),
        ("2025-08-03", "2025-08-08"),
        ("2025-09-04", "2025-09-08"),
        ("2025-10-08", "2025-10-11"),
        ("2025-11-11", "2025-11-15"),
        # ("2025-12-08", "2025-12-13"),
    ]
    cramps = ["2025-08-01", "2025-09-02", "2025-12-04"]

    app = create_app()
    count = 0
    with app.app_context():
        for start, end in periods:
            for day in dates_between(start, end):
                upsert_log(day, "period", "medium")
                count += 1
        for day in cramps:
            upsert_log(day, "cramps", "light")
            count += 1

    print(f"Seeded {count} logs ({len(periods)} periods) into the app database.")


if __name__ == "__main__":
    main()
