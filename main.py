import sys
import time
from typing import Annotated

from rym import Task

__prog__ = "main.py"


class Build(Task):
    """build helpers for the demo project"""

    def execute(self, target: Annotated[str, "what to build"], jobs=1, *, verbose=False):
        """build one target"""
        self.log.info("building %s with %d job(s)", target, jobs)
        for step in range(3):
            if self.cancellation.cancelled:
                self.log.warning("build of %s cancelled at step %d", target, step)
                return
            if verbose:
                print(f"[{step + 1}/3] {target}")
            time.sleep(0.1)

    def clean(self):
        """remove build output"""
        print("clean")


if __name__ == '__main__':
    sys.exit(Build.run())
