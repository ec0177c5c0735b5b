"""Dialog orchestration: button payload codec, prompts and the state machine.

The orchestrator lives in ``birdbot.dialogue.orchestrator``; it is not
re-exported here because the result renderers import the payload codec.
"""

from .payloads import Action, ButtonPayload, decode

__all__ = ["Action", "ButtonPayload", "decode"]
