"""BioCHP fleet financial engine: pure Python, no UI."""


def evaluate(*args, **kwargs):
    from biochp.orchestrator import evaluate as _evaluate
    return _evaluate(*args, **kwargs)


def sensitivity(*args, **kwargs):
    from biochp.orchestrator import sensitivity as _sensitivity
    return _sensitivity(*args, **kwargs)


__all__ = ["evaluate", "sensitivity"]
