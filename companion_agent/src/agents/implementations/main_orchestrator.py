# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
The main orchestrator owns the user facing root agent and everything it
delegates to.

On ``initialize`` it connects the models, runs the planner when a new plan is
needed, and installs the plan into the root agent's system prompt. Application
events are queued with ``push_event`` and delivered to the root agent in
batches by ``act_events``.
"""

import asyncio
import logging

from typing import Callable, Optional

from ..agent import Agent
from ..agent_calling import sub_agents_tool
from .planner import Planner, planner_input
from .sub_agents import SubAgents, Toolkits
from ...config import AppConfig, Settings, load_app_config
from ...context.context import Context
from ...context.persistence import load_conversation, persist_conversation
from ...events.event_queue import EventQueue, format_events
from ...events.workflow_log import WorkflowLog
from ...llm.chat_model import ChatModel
from ...llm.providers.base_provider import BaseProvider
from ...storage.kv_store import KeyValueStore, SqliteStore
from ...storage.activity_log import ActivityLog
from ...tools.mood_tools import MoodTracker, mood_tools
from ...tools.phase_tools import PhaseTracker, mark_challenge_ready_tool
from ...interaction.side_channel import InterviewChannel, PromptChannel
from ...types.event_types import Event
from ...types.message_types import AssistantMessage, event_message, system_message, user_message

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

PLAN_KEY = "plan"
MAIN_CONTEXT_KEY = "main-context"


class MainOrchestrator:
    def __init__(
        self,
        config: AppConfig,
        store: KeyValueStore,
        model: ChatModel,
        talk_model: ChatModel,
        toolkits: Optional[Toolkits] = None,
        prompt_channel: Optional[PromptChannel] = None,
        interview_channel: Optional[InterviewChannel] = None,
        workflow_log: Optional[WorkflowLog] = None,
    ):
        self.config = config
        self.store = store
        self.models = (model, talk_model)
        self.prompt_channel = prompt_channel or PromptChannel()
        self.interview_channel = interview_channel or InterviewChannel()
        self.workflow_log = workflow_log or WorkflowLog()
        self.activity = ActivityLog(store)
        self.mood = MoodTracker(store)
        self.phases = PhaseTracker(store, config.phases)
        self.events = EventQueue()

        self.sub_agents = SubAgents(
            config,
            model,
            store,
            self.prompt_channel,
            self.interview_channel,
            toolkits=toolkits,
            workflow_log=self.workflow_log,
        )
        self.root = Agent(
            Context(),
            talk_model,
            [sub_agents_tool(self.sub_agents.defs), *mood_tools(self.mood, self.activity)],
            workflow_log=self.workflow_log,
            name="main",
        )
        self.planner = Planner(
            config,
            model,
            store,
            tools=[self.sub_agents.info_tool(), mark_challenge_ready_tool(self.phases)],
            workflow_log=self.workflow_log,
        )

        self.plan: str = ""
        self._initialized = False
        self._init_lock = asyncio.Lock()
        self._stop_persisting: Optional[Callable[[], None]] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        config: Optional[AppConfig] = None,
        store: Optional[KeyValueStore] = None,
        toolkits: Optional[Toolkits] = None,
    ) -> "MainOrchestrator":
        return cls(
            config=config or load_app_config(settings.config_path),
            store=store or SqliteStore(settings.store_path),
            model=ChatModel(None, settings.MODEL),
            talk_model=ChatModel(None, settings.TALK_MODEL),
            toolkits=toolkits,
        )

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self, provider: BaseProvider) -> str:
        """Connect the models and install the session plan. Idempotent.

        If planning fails the error propagates and the orchestrator stays
        uninitialized, so ``initialize`` can be retried.
        """
        async with self._init_lock:
            if self._initialized:
                return self.plan
            logger.info("Initializing main agent")

            for model in self.models:
                model.set_provider(provider)

            past_plan = self.store.get(PLAN_KEY)
            past_conversation = load_conversation(self.store, MAIN_CONTEXT_KEY)

            plan = past_plan
            if not past_plan or past_conversation:
                plan = await self.planner.plan(
                    planner_input(
                        phase_context=self.phases.context_prompt(),
                        mood=self.mood.get(),
                        recent_activity=self.activity.for_agent(),
                        past_plan=past_plan,
                        past_conversation=past_conversation,
                    )
                )

            if plan:
                self.store.set(PLAN_KEY, plan)

            if self._stop_persisting is None:
                self._stop_persisting = persist_conversation(
                    self.root.context, self.store, MAIN_CONTEXT_KEY
                )

            self.plan = plan or ""
            self.root.context.system = [
                system_message("\n".join([self.config.main_prompt, "# Current Plan:", self.plan]))
            ]
            self._initialized = True
            logger.info("Main agent initialized")
            return self.plan

    def push_event(self, category: str, message: str) -> None:
        self.events.push(Event(category=category, message=message))

    async def act_events(self) -> Optional[AssistantMessage]:
        """Deliver all queued events to the root agent in a single turn."""
        events = self.events.drain()
        if not events:
            return None
        logger.info(f"Delivering {len(events)} event(s) to the main agent")
        return await self.root.act(event_message(format_events(events)))

    async def act(self, text: str) -> AssistantMessage:
        if not self._initialized:
            logger.warning("Main agent used before initialization")
        return await self.root.act(user_message(text))
