"""Tests for the create-pipeline task and its helpers."""

import io
import unittest
from contextlib import redirect_stderr
from unittest import mock

from azure.devops.v7_0.build.models import Build, BuildDefinition
from invoke import Context

from bedrock_pipeline.config.exceptions import (
    ConfigException,
    GitLookupError,
    PipelineDefinitionError,
    PipelineInputError,
)
from bedrock_pipeline.config.models import AzureDevOpsConfig, BedrockConfig
from bedrock_pipeline.tasks import build_namespace, pipeline


def _valid_inputs(**overrides):
    inputs = {
        'pipeline_name': 'svc-pipeline',
        'personal_access_token': 'pat-token',
        'org_name': 'myorg',
        'repo_name': 'svc',
        'repo_url': 'https://dev.azure.com/myorg/proj/_git/svc',
        'devops_project': 'proj',
        'packages_dir': None,
    }
    inputs.update(overrides)
    return inputs


class TestValidateInputs(unittest.TestCase):
    """Every required option must be a string."""

    def test_valid_inputs_pass(self):
        pipeline.validate_inputs(_valid_inputs())

    def test_packages_dir_is_optional(self):
        pipeline.validate_inputs(_valid_inputs(packages_dir=None))

    def test_each_required_option_rejects_non_strings(self):
        for key, flag in pipeline.REQUIRED_INPUTS:
            for bad_value in (None, 42, ['x']):
                with self.subTest(flag=flag, value=bad_value):
                    with self.assertRaises(PipelineInputError) as ctx:
                        pipeline.validate_inputs(_valid_inputs(**{key: bad_value}))
                    self.assertEqual(
                        str(ctx.exception),
                        f"{flag} must be of type 'string', {type(bad_value).__name__} given."
                    )
                    self.assertEqual(ctx.exception.flag, flag)

    def test_first_failing_option_is_reported(self):
        with self.assertRaises(PipelineInputError) as ctx:
            pipeline.validate_inputs(_valid_inputs(org_name=None, devops_project=None))
        self.assertEqual(ctx.exception.flag, '--org-name')


class TestResolveInputs(unittest.TestCase):
    """Defaults from config, git and the service name."""

    def setUp(self):
        self.config = BedrockConfig(azure_devops=AzureDevOpsConfig(
            org='cfg-org', project='cfg-project', access_token='cfg-token'
        ))
        self.origin = mock.Mock(return_value='git@ssh.dev.azure.com:v3/gitorg/gitproj/git-repo')

    def _options(self, **overrides):
        options = dict.fromkeys(
            ['pipeline_name', 'personal_access_token', 'org_name', 'repo_name',
             'repo_url', 'devops_project', 'packages_dir']
        )
        options.update(overrides)
        return options

    def test_fills_from_config_and_git(self):
        resolved = pipeline.resolve_inputs('svc', self._options(), self.config, self.origin)

        self.assertEqual(resolved['org_name'], 'cfg-org')
        self.assertEqual(resolved['devops_project'], 'cfg-project')
        self.assertEqual(resolved['personal_access_token'], 'cfg-token')
        self.assertEqual(resolved['pipeline_name'], 'svc-pipeline')
        self.assertEqual(resolved['repo_name'], 'git-repo')
        self.assertEqual(resolved['repo_url'], 'https://dev.azure.com/gitorg/gitproj/_git/git-repo')
        self.assertIsNone(resolved['packages_dir'])

    def test_explicit_options_win(self):
        resolved = pipeline.resolve_inputs('svc', self._options(
            org_name='cli-org', pipeline_name='custom', repo_name='r', repo_url='u',
            packages_dir='packages'
        ), self.config, self.origin)

        self.assertEqual(resolved['org_name'], 'cli-org')
        self.assertEqual(resolved['pipeline_name'], 'custom')
        self.assertEqual(resolved['repo_name'], 'r')
        self.assertEqual(resolved['repo_url'], 'u')
        self.assertEqual(resolved['packages_dir'], 'packages')
        self.origin.assert_not_called()

    def test_git_failure_leaves_repo_unset(self):
        origin = mock.Mock(side_effect=GitLookupError("no origin"))

        resolved = pipeline.resolve_inputs('svc', self._options(), BedrockConfig(), origin)

        self.assertIsNone(resolved['repo_name'])
        self.assertIsNone(resolved['repo_url'])
        self.assertIsNone(resolved['org_name'])


class TestInstallPipeline(unittest.TestCase):
    """Create the definition, then queue a build against it."""

    def setUp(self):
        self.build_api = mock.Mock()
        self.build_api.create_definition.return_value = BuildDefinition(id=1234, name='svc-pipeline')
        self.build_api.queue_build.return_value = Build(id=5)
        patcher = mock.patch.object(pipeline, 'get_build_api_client', return_value=self.build_api)
        self.get_client = patcher.start()
        self.addCleanup(patcher.stop)
        self.exit_fn = mock.Mock(return_value='exited')

    def _install(self, packages_dir=None):
        return pipeline.install_pipeline(
            'svc', 'myorg', 'pat-token', 'svc-pipeline', 'svc',
            'https://dev.azure.com/myorg/proj/_git/svc', 'proj', packages_dir, self.exit_fn
        )

    def test_success_queues_build_with_created_definition_id(self):
        result = self._install()

        self.get_client.assert_called_once_with('myorg', 'pat-token')
        self.exit_fn.assert_not_called()
        self.assertEqual(result.id, 5)
        build_reference, project = self.build_api.queue_build.call_args.args
        self.assertEqual(project, 'proj')
        self.assertEqual(build_reference.definition.id, 1234)

    def test_definition_for_standalone_repo(self):
        self._install()

        definition, project = self.build_api.create_definition.call_args.args
        self.assertEqual(project, 'proj')
        self.assertEqual(definition.name, 'svc-pipeline')
        self.assertEqual(definition.process.yaml_filename, 'azure-pipelines.yaml')
        self.assertEqual(definition.repository.default_branch, 'master')
        self.assertEqual(definition.triggers[0].branch_filters, ['master'])
        self.assertEqual(definition.triggers[0].max_concurrent_builds_per_branch, 1)

    def test_definition_for_monorepo(self):
        self._install(packages_dir='packages')

        definition, _ = self.build_api.create_definition.call_args.args
        self.assertEqual(definition.process.yaml_filename, 'packages/svc/azure-pipelines.yaml')

    def test_client_failure_exits(self):
        self.get_client.side_effect = RuntimeError("unauthorized")

        with self.assertLogs('bedrock_pipeline.tasks.pipeline', level='ERROR') as logs:
            result = self._install()

        self.assertEqual(result, 'exited')
        self.exit_fn.assert_called_once_with(1)
        self.assertTrue(any('unauthorized' in line for line in logs.output))
        self.build_api.create_definition.assert_not_called()

    def test_creation_failure_exits_without_queueing(self):
        self.build_api.create_definition.side_effect = RuntimeError("duplicate name")

        with self.assertLogs('bedrock_pipeline.tasks.pipeline', level='ERROR') as logs:
            self._install()

        self.exit_fn.assert_called_once_with(1)
        self.build_api.queue_build.assert_not_called()
        self.assertTrue(any('Error occurred during pipeline creation for svc-pipeline' in line
                            for line in logs.output))

    def test_queue_failure_exits(self):
        self.build_api.queue_build.side_effect = RuntimeError("queue down")

        with self.assertLogs('bedrock_pipeline.tasks.pipeline', level='ERROR') as logs:
            self._install()

        self.exit_fn.assert_called_once_with(1)
        self.assertTrue(any('Error occurred when queueing build for svc-pipeline' in line
                            for line in logs.output))

    def test_created_definition_without_id_raises(self):
        self.build_api.create_definition.return_value = BuildDefinition(name='svc-pipeline')

        with self.assertRaises(PipelineDefinitionError):
            self._install()
        self.build_api.queue_build.assert_not_called()


class TestCreatePipelineTask(unittest.TestCase):
    """The create-pipeline invoke task."""

    def setUp(self):
        for name, kwargs in [
            ('bootstrap_logging', {}),
            ('load_config', {'return_value': BedrockConfig()}),
            ('get_origin_url', {'side_effect': GitLookupError("not a repo")}),
            ('install_pipeline', {}),
        ]:
            patcher = mock.patch.object(pipeline, name, **kwargs)
            setattr(self, name, patcher.start())
            self.addCleanup(patcher.stop)

    def _run(self, service_name='svc', **options):
        return pipeline.create_pipeline(Context(), service_name, **options)

    def test_task_is_registered_as_create_pipeline(self):
        task_names = build_namespace().task_names
        self.assertIn('create-pipeline', task_names)
        self.assertIn('p', task_names['create-pipeline'])

    def test_missing_options_exit_with_status_1(self):
        with self.assertLogs('bedrock_pipeline.tasks.pipeline', level='ERROR') as logs:
            with self.assertRaises(SystemExit) as ctx:
                self._run(personal_access_token='pat-token')

        self.assertEqual(ctx.exception.code, 1)
        self.install_pipeline.assert_not_called()
        self.assertTrue(any('Error occurred validating inputs for svc' in line for line in logs.output))

    def test_valid_options_install_pipeline(self):
        self._run(
            personal_access_token='pat-token', org_name='myorg', repo_name='svc',
            repo_url='https://dev.azure.com/myorg/proj/_git/svc', devops_project='proj',
            packages_dir='packages'
        )

        self.install_pipeline.assert_called_once_with(
            'svc', 'myorg', 'pat-token', 'svc-pipeline', 'svc',
            'https://dev.azure.com/myorg/proj/_git/svc', 'proj', 'packages', mock.ANY
        )

    def test_config_supplies_credentials(self):
        self.load_config.return_value = BedrockConfig(azure_devops=AzureDevOpsConfig(
            org='cfg-org', project='cfg-project', access_token='cfg-token'
        ))
        self.get_origin_url.side_effect = None
        self.get_origin_url.return_value = 'https://github.com/me/svc.git'

        self._run()

        args = self.install_pipeline.call_args.args
        self.assertEqual(args[:8], (
            'svc', 'cfg-org', 'cfg-token', 'svc-pipeline', 'svc',
            'https://github.com/me/svc', 'cfg-project', None
        ))

    def test_install_error_exits_with_status_1(self):
        self.install_pipeline.side_effect = PipelineDefinitionError("no id")

        with self.assertLogs('bedrock_pipeline.tasks.pipeline', level='ERROR') as logs:
            with self.assertRaises(SystemExit) as ctx:
                self._run(
                    personal_access_token='pat-token', org_name='myorg', repo_name='svc',
                    repo_url='u', devops_project='proj'
                )
        self.assertEqual(ctx.exception.code, 1)
        self.assertTrue(any('Error occurred installing pipeline for svc' in line for line in logs.output))
        self.assertTrue(any('no id' in line for line in logs.output))

    def test_config_error_exits_with_status_1(self):
        self.load_config.side_effect = ConfigException("Invalid YAML in config.yaml", path='config.yaml')
        stderr = io.StringIO()

        with redirect_stderr(stderr):
            with self.assertRaises(SystemExit) as ctx:
                self._run(personal_access_token='pat-token')

        self.assertEqual(ctx.exception.code, 1)
        self.install_pipeline.assert_not_called()
        self.assertIn('Configuration error: Invalid YAML in config.yaml', stderr.getvalue())

    def test_access_token_is_not_logged(self):
        with self.assertLogs('bedrock_pipeline.tasks.pipeline', level='DEBUG') as logs:
            self._run(
                personal_access_token='very-secret-token', org_name='myorg', repo_name='svc',
                repo_url='u', devops_project='proj'
            )
        self.assertFalse(any('very-secret-token' in line for line in logs.output))


if __name__ == '__main__':
    unittest.main()
