"""Confirmation gateways"""

import asyncio
import itertools
import logging
from collections import deque
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional, Tuple

from pomo.features.prompts.domain import Prompt, PromptKind, PromptStateError, PromptStatus
from pomo.features.prompts.schemas import ResolvePromptRequest
from pomo.features.timer.domain import EndChoice, Mode
from pomo.features.timer.ports import ConfirmationGateway

logger = logging.getLogger(__name__)

END_CHOICES = [EndChoice.QUIT, EndChoice.CONTINUE, EndChoice.NEXT]

MAX_FINISHED_PROMPTS = 50


def _mode_label(mode: Mode) -> str:
    return "pomodoro" if mode == Mode.POMO else "break"


class AutoConfirmationGateway(ConfirmationGateway):
    """Answers every prompt without asking: start, advance, empty reason"""

    async def confirm_start(self, candidate_mode: Mode) -> bool:
        return True

    async def confirm_end_of_session(self, candidate_next_mode: Mode, allow_unsuccessful: bool) -> EndChoice:
        return EndChoice.NEXT

    async def prompt_unsuccessful_reason(self) -> str:
        return ""


class PromptBroker(ConfirmationGateway):
    """
    Turns each confirmation into a pending Prompt that a client answers later.

    The asking coroutine waits on a future that is resolved exactly once by
    resolve(). There is no timeout. Only the most recent answered or
    abandoned prompts are kept for lookup.
    """

    def __init__(self, max_finished: int = MAX_FINISHED_PROMPTS):
        self._ids = itertools.count(1)
        self._prompts: Dict[int, Tuple[Prompt, asyncio.Future]] = {}
        self._finished: Deque[int] = deque()
        self.max_finished = max_finished

    def pending(self) -> List[Prompt]:
        return [prompt for prompt, _ in self._prompts.values() if prompt.is_pending()]

    def get(self, prompt_id: int) -> Prompt:
        if prompt_id not in self._prompts:
            raise KeyError(f"Prompt {prompt_id} not found")
        return self._prompts[prompt_id][0]

    async def _ask(
        self,
        kind: PromptKind,
        title: str,
        candidate_mode: Optional[Mode] = None,
        choices: Optional[List[EndChoice]] = None,
    ) -> Any:
        prompt = Prompt(
            id=next(self._ids),
            kind=kind,
            title=title,
            candidate_mode=candidate_mode,
            choices=choices or [],
            created_at=datetime.now().astimezone(),
        )
        future = asyncio.get_running_loop().create_future()
        self._prompts[prompt.id] = (prompt, future)
        logger.info(f"Prompt {prompt.id} opened: {title}")

        try:
            return await future
        finally:
            if prompt.is_pending():
                # The waiting caller went away before an answer arrived
                prompt.status = PromptStatus.ABANDONED
                logger.warning(f"Prompt {prompt.id} abandoned")
            self._retire(prompt.id)

    async def confirm_start(self, candidate_mode: Mode) -> bool:
        return await self._ask(
            PromptKind.CONFIRM_START,
            f"Start {_mode_label(candidate_mode)}?",
            candidate_mode=candidate_mode,
        )

    async def confirm_end_of_session(self, candidate_next_mode: Mode, allow_unsuccessful: bool) -> EndChoice:
        choices = list(END_CHOICES)
        if allow_unsuccessful:
            choices.insert(0, EndChoice.UNSUCCESSFUL)
        return await self._ask(
            PromptKind.END_OF_SESSION,
            f"Session ended. Continue in overtime or start the next {_mode_label(candidate_next_mode)}?",
            candidate_mode=candidate_next_mode,
            choices=choices,
        )

    async def prompt_unsuccessful_reason(self) -> str:
        return await self._ask(
            PromptKind.UNSUCCESSFUL_REASON,
            "Why was this pomodoro unsuccessful? (Optional)",
        )

    def resolve(self, prompt_id: int, request: ResolvePromptRequest) -> Prompt:
        """
        Answer a pending prompt.

        Raises:
            KeyError: Unknown prompt
            PromptStateError: Prompt already answered or abandoned
            ValueError: Answer does not fit the prompt
        """
        prompt = self.get(prompt_id)
        future = self._prompts[prompt_id][1]
        if not prompt.is_pending() or future.done():
            raise PromptStateError(f"Prompt {prompt_id} is already {prompt.status.value}")

        answer = self._validate(prompt, request)

        prompt.status = PromptStatus.RESOLVED
        prompt.resolved_at = datetime.now().astimezone()
        future.set_result(answer)
        logger.info(f"Prompt {prompt_id} resolved with {answer!r}")
        return prompt

    def _retire(self, prompt_id: int) -> None:
        """Forget the oldest finished prompts beyond max_finished"""
        self._finished.append(prompt_id)
        while len(self._finished) > self.max_finished:
            self._prompts.pop(self._finished.popleft(), None)

    @staticmethod
    def _validate(prompt: Prompt, request: ResolvePromptRequest) -> Any:
        if prompt.kind == PromptKind.CONFIRM_START:
            if request.approved is None:
                raise ValueError("'approved' is required for a start confirmation")
            return request.approved

        if prompt.kind == PromptKind.END_OF_SESSION:
            if request.choice is None:
                raise ValueError("'choice' is required for an end-of-session prompt")
            if request.choice not in prompt.choices:
                raise ValueError(f"'{request.choice.value}' is not offered by prompt {prompt.id}")
            return request.choice

        return request.reason or ""
