# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""
Readiness polling: repeat a health check at a fixed interval until it passes
or the attempt budget runs out.
"""
import logging
import time
from typing import Callable

import click
from tenacity import Retrying, RetryError, RetryCallState, stop_after_attempt, wait_fixed, retry_if_result

from ..MODELS.readiness_probe import ReadinessProbe
from ..MODELS.errors import ReadinessTimeout

logger = logging.getLogger(__name__)


def _not_ready(result: bool) -> bool:
    return not result


class ReadinessProber:
    """
    Blocks until a probe's health check passes.
    No jitter and no backoff growth: the interval is fixed.
    """

    def __init__(self, sleep: Callable[[float], None] = time.sleep):
        """
        Initializes the prober.

        :param sleep: Function used to wait between attempts.
        """
        self.sleep = sleep

    def wait_until_ready(self, probe: ReadinessProbe) -> int:
        """
        Runs the probe until it succeeds.

        :param probe: The probe to run.
        :return: Number of attempts used, at most probe.max_attempts.
        :raises ReadinessTimeout: After max_attempts consecutive failures.
        """
        attempts = 0

        def attempt() -> bool:
            nonlocal attempts
            attempts += 1
            ok = bool(probe.check())
            logger.debug("Probe %s attempt %d: %s", probe.name, attempts, "ok" if ok else "failed")
            return ok

        def report(retry_state: RetryCallState):
            click.echo(
                f"Waiting for {probe.name} to be ready... "
                f"({retry_state.attempt_number}/{probe.max_attempts})"
            )

        retrying = Retrying(
            stop=stop_after_attempt(probe.max_attempts),
            wait=wait_fixed(probe.interval),
            retry=retry_if_result(_not_ready),
            before_sleep=report,
            sleep=self.sleep,
        )

        try:
            retrying(attempt)
        except RetryError:
            raise ReadinessTimeout(probe.name, attempts, probe.hint) from None

        return attempts
