"""
Normalized user profile built from a Cognito GetUser response.

GetUser returns the username plus an ordered list of {"Name", "Value"} pairs.
The profile flattens that into a plain mapping: "username" first, then every
attribute in the order Cognito sent it. A repeated name keeps its last value.
An attribute literally named "username" replaces the canonical field; that is
how the attribute list has always been applied, so it is kept and logged.
"""

import logging
from typing import Any, Dict, Mapping

from .errors import MalformedResponseError

logger = logging.getLogger(__name__)

USERNAME_KEY = "username"


class Profile(Dict[str, str]):
    """Insertion-ordered attribute name -> value mapping, always with a username."""

    @property
    def username(self) -> str:
        return self[USERNAME_KEY]

    @property
    def attributes(self) -> Dict[str, str]:
        """Provider attributes without the canonical username field."""
        return {k: v for k, v in self.items() if k != USERNAME_KEY}


def build_profile(response: Mapping[str, Any]) -> Profile:
    """
    Convert a GetUser response into a Profile.

    The whole response is validated before anything is assigned, so a
    MalformedResponseError never leaves a half-built profile behind.
    """
    if not isinstance(response, Mapping):
        raise MalformedResponseError(f"GetUser response is not a mapping: {type(response).__name__}")

    username = response.get("Username")
    if not isinstance(username, str) or not username:
        raise MalformedResponseError("GetUser response has no Username")

    attributes = response.get("UserAttributes")
    if not isinstance(attributes, (list, tuple)):
        raise MalformedResponseError("GetUser response UserAttributes is missing or not a list")

    pairs = []
    for index, attribute in enumerate(attributes):
        if not isinstance(attribute, Mapping):
            raise MalformedResponseError(f"UserAttributes[{index}] is not a mapping")
        name = attribute.get("Name")
        if not isinstance(name, str) or not name:
            raise MalformedResponseError(f"UserAttributes[{index}] has no Name")
        value = attribute.get("Value")
        pairs.append((name, "" if value is None else str(value)))

    profile = Profile()
    profile[USERNAME_KEY] = username
    for name, value in pairs:
        if name == USERNAME_KEY:
            logger.debug("Attribute 'username' overrides Cognito Username %r", username)
        profile[name] = value
    return profile
