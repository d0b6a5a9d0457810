"""
Engine error taxonomy

These never leave the engine: ScriptCatalog and AnimationInstance catch them
at their public methods, log them and turn them into an exclusion, a state
transition or a boolean result.
"""


class AnimScriptError(Exception):
    """Base class for engine errors"""


class DiscoveryTimeout(AnimScriptError):
    """A script did not answer --ckb-info within the timeout"""


class MalformedMetadata(AnimScriptError):
    """Info output is missing required fields or declares invalid params"""


class ProtocolDesync(AnimScriptError):
    """A script produced a line that does not fit the run protocol"""


class ChildTermination(AnimScriptError):
    """The child process went away (killed, crashed, pipe closed)"""
