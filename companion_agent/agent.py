# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
The main entrypoint to the system: a console front end for the orchestrator.
"""

import signal
import asyncio
import logging

import openai

from typing import Optional

from .src.agents.implementations.main_orchestrator import MainOrchestrator
from .src.config import Settings, settings
from .src.interaction.interview import InterviewSession
from .src.interaction.side_channel import SideChannelState
from .src.llm.base import ProviderError
from .src.llm.metering import usage_report
from .src.llm.providers.openrouter import create_provider
from .src.types.message_types import AssistantMessage, text_of

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger(__name__)

CANCEL_COMMAND = "/cancel"
QUIT_COMMAND = "/quit"

# Failures that end a single turn but not the session
TURN_ERRORS = (ProviderError, openai.APIError)


async def read_line(prompt: str) -> str:
    return await asyncio.to_thread(input, prompt)


def show(message: Optional[AssistantMessage], speaker: str = "agent") -> None:
    if message is None:
        return
    text = text_of(message).strip()
    if text:
        print(f"\n[{speaker}] {text}\n")


class ConsoleUI:
    """
    Drives one orchestrator from the terminal.

    While the root agent is acting, its tools may open a prompt or an
    interview. The UI watches both side-channels and answers them from stdin
    until the agent's turn completes.
    """

    def __init__(self, orchestrator: MainOrchestrator):
        self.orchestrator = orchestrator
        self._wakeup = asyncio.Event()
        self._shutdown_event = asyncio.Event()
        self._unsubscribers = [
            orchestrator.prompt_channel.listen(self._on_channel_state),
            orchestrator.interview_channel.listen(self._on_channel_state),
        ]
        self._register_signal_handlers()

    def _register_signal_handlers(self):
        try:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, self._signal_handler, sig)
        except (NotImplementedError, RuntimeError) as e:
            logger.debug(f"Signal handlers not registered: {e}")

    def _signal_handler(self, sig: signal.Signals):
        logger.info(f"Received signal {sig.name}, shutting down...")
        self._shutdown_event.set()
        self._wakeup.set()

    def _on_channel_state(self, state: SideChannelState) -> None:
        if state.is_open:
            self._wakeup.set()

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def show_error(self, error: Exception, what: str = "Agent turn") -> None:
        logger.error(f"{what} failed: {error}")
        print(f"\n[error] {what} failed: {error}\n")

    async def answer_prompt(self) -> None:
        channel = self.orchestrator.prompt_channel
        message = channel.state.message
        print(f"\n[question] {message}")
        response = await read_line("> ")
        if response.strip() == CANCEL_COMMAND:
            channel.cancel()
        else:
            channel.submit(response)

    async def run_interview(self) -> None:
        session = InterviewSession(
            self.orchestrator.interview_channel,
            self.orchestrator.sub_agents.info_agent.model,
            system_prompt=self.orchestrator.config.sysprompts.get("interview_agent"),
            workflow_log=self.orchestrator.workflow_log,
        )
        print("\n--- interview started (type /cancel to stop) ---")
        try:
            show(await session.begin(), "interview")
            while not session.finished:
                text = await read_line("interview> ")
                if text.strip() == CANCEL_COMMAND:
                    break
                show(await session.reply(text), "interview")
        except TURN_ERRORS as e:
            self.show_error(e, "Interview")
        finally:
            # The requesting tool is released with a cancellation
            if not session.finished:
                session.cancel()
            print("--- interview ended ---\n")

    async def run_turn(self, text: str) -> Optional[AssistantMessage]:
        """Run one root agent turn, servicing side-channel requests meanwhile."""
        turn = asyncio.create_task(self.orchestrator.act(text))
        try:
            while not turn.done():
                if self._shutdown_event.is_set():
                    turn.cancel()
                    break
                if self.orchestrator.prompt_channel.is_open:
                    await self.answer_prompt()
                    continue
                if self.orchestrator.interview_channel.is_open:
                    await self.run_interview()
                    continue

                self._wakeup.clear()
                waiter = asyncio.create_task(self._wakeup.wait())
                await asyncio.wait({turn, waiter}, return_when=asyncio.FIRST_COMPLETED)
                waiter.cancel()
        finally:
            if not turn.done():
                turn.cancel()

        try:
            return await turn
        except asyncio.CancelledError:
            logger.info("Agent turn cancelled")
            return None

    async def run(self) -> None:
        print(f"Type a message to talk to the agent, {QUIT_COMMAND} to exit.\n")
        while not self._shutdown_event.is_set():
            if len(self.orchestrator.events):
                try:
                    show(await self.orchestrator.act_events())
                except TURN_ERRORS as e:
                    self.show_error(e, "Event delivery")
            try:
                text = await read_line("you> ")
            except EOFError:
                break
            if text.strip() == QUIT_COMMAND:
                break
            if not text.strip():
                continue
            try:
                show(await self.run_turn(text))
            except TURN_ERRORS as e:
                self.show_error(e)


def build_orchestrator(app_settings: Settings = settings) -> MainOrchestrator:
    app_settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    return MainOrchestrator.from_settings(app_settings)


async def run_chat(app_settings: Settings = settings) -> None:
    orchestrator = build_orchestrator(app_settings)
    plan = await orchestrator.initialize(create_provider(app_settings))
    logger.debug(f"Session plan:\n{plan}")

    ui = ConsoleUI(orchestrator)
    try:
        await ui.run()
    finally:
        ui.close()
        logger.info(f"Token usage:\n{usage_report()}")


async def show_plan(app_settings: Settings = settings) -> None:
    orchestrator = build_orchestrator(app_settings)
    plan = await orchestrator.initialize(create_provider(app_settings))
    print(plan or "(no plan)")
    print(f"\n{usage_report()}")
