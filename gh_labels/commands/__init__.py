"""Commands for gh-labels."""

# Import all commands to register them
from gh_labels.commands.apply import ApplyCommand
from gh_labels.commands.auth import AuthCommand
from gh_labels.commands.base import Command, get_command_registry, register_command
from gh_labels.commands.labels import CreateCommand, DeleteCommand, GetCommand, ListCommand, UpdateCommand
from gh_labels.commands.template import TemplateCommand

__all__ = [
    "Command",
    "register_command",
    "get_command_registry",
    "ListCommand",
    "GetCommand",
    "CreateCommand",
    "UpdateCommand",
    "DeleteCommand",
    "ApplyCommand",
    "TemplateCommand",
    "AuthCommand",
]
