"""Console entry point for the bedrock CLI."""

from invoke import Program

from . import __version__
from .tasks import build_namespace

namespace = build_namespace()

program = Program(
    name='bedrock',
    binary='bedrock',
    version=__version__,
    namespace=namespace,
)
