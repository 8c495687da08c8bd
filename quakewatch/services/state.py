from quakewatch.ml.pipeline import AnomalyPipeline

_pipeline = AnomalyPipeline()


def get_pipeline() -> AnomalyPipeline:
    return _pipeline


def replace_pipeline(new_pipeline: AnomalyPipeline) -> AnomalyPipeline:
    global _pipeline
    _pipeline = new_pipeline
    return _pipeline
