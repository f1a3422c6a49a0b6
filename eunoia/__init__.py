"""
Eunoia Agent Service

A mental wellbeing companion exposed as an A2A (agent-to-agent) agent:
JSON-RPC gateway, platform adapters and conversation orchestration.
"""

__version__ = "1.0.0"
__description__ = "A2A gateway and conversation orchestrator for the Eunoia wellbeing agent"
