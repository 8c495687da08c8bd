from quakewatch.core.config import get_settings
from quakewatch.core.log_config import configure_logging
from quakewatch.ml.columns import SCORE_COLUMN, SEVERITY_COLUMN
from quakewatch.ml.pipeline import AnomalyPipeline
from quakewatch.ml.simulation import simulate_readings


def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    frame = simulate_readings(50, seed=settings.random_seed, spike_rows=[39])
    scored = AnomalyPipeline(settings).detect(frame)
    flagged = scored[scored[SEVERITY_COLUMN] != "Low"]
    print(scored[[SCORE_COLUMN, SEVERITY_COLUMN]].describe(include="all"))
    print(flagged)


if __name__ == "__main__":
    run()
