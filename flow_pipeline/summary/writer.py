import json
import os
import tempfile
from pathlib import Path
from typing import Union

from loguru import logger

from flow_pipeline.summary.models import SummaryDocument


def write_summary(document: SummaryDocument, output_path: Union[str, Path]) -> Path:
    """
    Write the document in one step.

    Content goes to a temp file in the target directory which then replaces
    the previous artifact, so readers never see a half-written document.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    content = json.dumps(document.model_dump(), indent=2) + "\n"

    fd, tmp_name = tempfile.mkstemp(prefix=f".{output_path.name}.", suffix=".tmp", dir=output_path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, output_path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise

    logger.info(f"Wrote summary to {output_path} ({len(content)} bytes)")
    return output_path
