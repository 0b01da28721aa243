# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from .base_provider import BaseProvider
from .openrouter import OpenRouterProvider, create_provider

__all__ = ["BaseProvider", "OpenRouterProvider", "create_provider"]
