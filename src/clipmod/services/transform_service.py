import logging
import multiprocessing
import queue
import time
from typing import Tuple, Union

from clipmod.config import DEFAULT_TRANSFORM_TIMEOUT
from clipmod.models.modifier import ModifierScript
from clipmod.utils.sandbox import OK, evaluate_modifier

logger = logging.getLogger(__name__)

_RESULT_POLL = 0.05


class TransformEngine:
    """Runs modifier scripts against text, best effort.

    Each call evaluates the script in a fresh interpreter process that is
    killed once it answers or runs out of time. Whatever goes wrong, the
    caller gets the input text back unchanged.
    """

    def __init__(self, timeout: float = DEFAULT_TRANSFORM_TIMEOUT, start_method: str = "spawn"):
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = timeout
        self._context = multiprocessing.get_context(start_method)

    def apply(self, script: Union[ModifierScript, str], text: str) -> str:
        if isinstance(script, ModifierScript):
            name, source = script.name, script.source
        else:
            name, source = "<inline>", script

        ok, value = self._run(source, text)
        if not ok:
            logger.warning(f"Modifier {name} failed, returning input unchanged: {value}")
            return text

        logger.debug(f"Modifier {name} produced {len(value)} chars")
        return value

    def _run(self, source: str, text: str) -> Tuple[bool, str]:
        results = self._context.Queue(maxsize=1)
        proc = self._context.Process(
            target=evaluate_modifier,
            args=(source, text, results),
            daemon=True,
        )

        try:
            proc.start()
        except OSError as e:
            results.close()
            return False, f"could not start sandbox process: {e}"

        try:
            status, value = self._wait_for_result(proc, results)
        except queue.Empty:
            if proc.is_alive():
                return False, f"timed out after {self.timeout:.2f}s"
            return False, f"sandbox process exited with code {proc.exitcode} and no result"
        finally:
            if proc.is_alive():
                proc.kill()
            proc.join()
            results.close()

        return status == OK, value

    def _wait_for_result(self, proc, results):
        deadline = time.monotonic() + self.timeout
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise queue.Empty
            try:
                return results.get(timeout=min(remaining, _RESULT_POLL))
            except queue.Empty:
                if not proc.is_alive():
                    # The child may have exited right after flushing its result.
                    return results.get(timeout=_RESULT_POLL)
