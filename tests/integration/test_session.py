"""Interactive session scenarios."""

from pytest_bdd import scenarios

from .steps.session_steps import *  # noqa: F403

scenarios("session.feature")
