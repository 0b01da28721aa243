# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from .event_queue import EventQueue, format_events
from .workflow_log import WorkflowLog

__all__ = ["EventQueue", "format_events", "WorkflowLog"]
