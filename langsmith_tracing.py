"""LangSmith tracing — one submission attempt = one trace."""

import os
from contextlib import contextmanager

import langsmith as ls
from langsmith.run_trees import RunTree

from config import LANGSMITH_TRACING, LANGSMITH_PROJECT

TAGS = ["loan-intake", "submission"]


def _ensure_env():
    """Ensure LangSmith env vars are set when tracing is enabled."""
    if LANGSMITH_TRACING:
        os.environ.setdefault("LANGSMITH_TRACING", "true")
        os.environ.setdefault("LANGSMITH_PROJECT", LANGSMITH_PROJECT)


@contextmanager
def submission_trace(session_id: str, channel: str, enabled: bool | None = None):
    """
    Wrap one submission attempt in a LangSmith run. Yields the RunTree, or
    None when tracing is off. An exception escaping the block is recorded on
    the run and re-raised.
    """
    if enabled is None:
        enabled = LANGSMITH_TRACING
    if not enabled:
        yield None
        return

    _ensure_env()
    metadata = {"session_id": session_id, "channel": channel}
    root = RunTree(
        name="loan_intake_submission",
        run_type="chain",
        inputs=metadata,
        project_name=LANGSMITH_PROJECT,
    )
    root.add_metadata(metadata)
    root.add_tags(TAGS)
    root.post()

    try:
        with ls.tracing_context(
            project_name=LANGSMITH_PROJECT,
            enabled=True,
            parent=root,
            metadata=metadata,
            tags=TAGS,
        ):
            yield root
    except Exception as e:
        root.end(error=str(e))
        root.patch()
        raise
    else:
        root.end(outputs={"status": "ok"})
        root.patch()
