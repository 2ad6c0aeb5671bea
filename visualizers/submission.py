"""
Submission capture: the experiment state attached to a student's
submission.  The snapshot goes through a JSON round trip, which both
proves it holds only plain data and guarantees the result shares nothing
with the live visualizer.
"""

import json
import logging
from typing import Any, Dict

from visualizers.base import Visualizer


logger = logging.getLogger(__name__)


def capture(visualizer: Visualizer) -> Dict[str, Any]:
    state = json.loads(json.dumps(visualizer.get_snapshot()))
    logger.info("captured %s state for submission", visualizer.kind)
    return {"experiment": visualizer.kind, "experiment_state": state}
