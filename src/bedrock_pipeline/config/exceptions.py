"""
Exception classes with built-in guidance for pipeline provisioning.
"""
import sys

from .logging import mask_secret

SECRET_FLAGS = ("--personal-access-token",)


def redact_argv(argv):
    """Return argv with the values of secret flags masked."""
    redacted = []
    mask_next = False
    for arg in argv:
        if mask_next:
            redacted.append(mask_secret(arg))
            mask_next = False
            continue
        flag, sep, value = arg.partition("=")
        if flag in SECRET_FLAGS:
            if sep:
                redacted.append(f"{flag}={mask_secret(value)}")
            else:
                redacted.append(arg)
                mask_next = True
            continue
        redacted.append(arg)
    return redacted


class PipelineException(Exception):
    """Base exception for all pipeline provisioning errors."""
    def __init__(self, message: str, flag: str = None, service_name: str = None,
                 pipeline_name: str = None, path: str = None):
        super().__init__(message)
        self.flag = flag
        self.service_name = service_name
        self.pipeline_name = pipeline_name
        self.path = path
        self.guidance = self._generate_guidance()

    def _get_current_command(self):
        """Get the current command being executed."""
        if len(sys.argv) > 0:
            executable = sys.argv[0].split('/')[-1]
            args = redact_argv(sys.argv[1:])
            if args:
                return f"{executable} {' '.join(args)}"
            else:
                return executable
        return "unknown command"

    def _generate_guidance(self):
        """Override in subclasses to provide specific guidance."""
        return f"""
❌ Pipeline error: {self}
💡 Re-run with --verbose for details
"""


class ConfigException(PipelineException):
    """Raised when the bedrock config file cannot be read or is invalid."""

    def _generate_guidance(self):
        location = self.path or '~/.bedrock/config.yaml'
        return f"""
❌ Configuration error: {self}
💡 Check {location} or point BEDROCK_CONFIG at a valid file
"""


class PipelineInputError(PipelineException):
    """Raised when a required option is missing or is not a string."""

    def _generate_guidance(self):
        command = self._get_current_command()
        return f"""
❌ Invalid input for {self.flag or 'create-pipeline'}: {self}
💡 Resolve this in one of the following ways:
   1. Pass the option explicitly: {command} {self.flag or ''}=<value>
   2. Or set it under azure_devops in your bedrock config file
"""


class GitLookupError(PipelineException):
    """Raised when repository coordinates cannot be derived from git."""

    def _generate_guidance(self):
        return f"""
❌ Could not determine repository details from git: {self}
💡 Pass --repo-name and --repo-url explicitly
"""


class PipelineCreationError(PipelineException):
    """Raised when Azure DevOps rejects or fails to create a build definition."""
    pass


class PipelineDefinitionError(PipelineException):
    """Raised when a created build definition comes back without an id."""
    pass


class BuildQueueError(PipelineException):
    """Raised when a build cannot be queued against a definition."""
    pass
