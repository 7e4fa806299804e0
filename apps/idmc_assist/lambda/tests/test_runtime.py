import unittest
from unittest.mock import Mock, patch

from idmc_api.errors import ProviderError
from idmc_api.infra import runtime
from idmc_api.infra.runtime import AssistSettings, build_provider_bindings, load_settings


class LoadSettingsTests(unittest.TestCase):
    def test_reads_keys_from_environment(self) -> None:
        settings = load_settings(
            {
                "GEMINI_API_KEY": "gemini-key",
                "OPENAI_API_KEY": "openai-key",
                "AWS_REGION": "us-east-1",
                "IDMC_ASSIST_REQUEST_TIMEOUT_SECONDS": "30",
            }
        )

        self.assertEqual(settings.google_api_key, "gemini-key")
        self.assertEqual(settings.openai_api_key, "openai-key")
        self.assertIsNone(settings.langsmith_api_key)
        self.assertEqual(settings.aws_region, "us-east-1")
        self.assertEqual(settings.request_timeout_seconds, 30.0)

    def test_google_api_key_is_used_when_gemini_key_is_blank(self) -> None:
        settings = load_settings({"GEMINI_API_KEY": " ", "GOOGLE_API_KEY": "google-key"})

        self.assertEqual(settings.google_api_key, "google-key")

    def test_missing_keys_are_none_without_touching_ssm(self) -> None:
        with patch.object(runtime.boto3, "client") as boto_client:
            settings = load_settings({})

        boto_client.assert_not_called()
        self.assertIsNone(settings.google_api_key)
        self.assertIsNone(settings.request_timeout_seconds)

    def test_falls_back_to_ssm_parameter(self) -> None:
        ssm_client = Mock()
        ssm_client.get_parameter.return_value = {"Parameter": {"Value": "ssm-gemini-key"}}

        with patch.object(runtime.boto3, "client", return_value=ssm_client) as boto_client:
            settings = load_settings(
                {"GEMINI_API_KEY_PARAMETER_NAME": "/idmc-assist/gemini-api-key"}
            )

        boto_client.assert_called_once_with("ssm", region_name="ap-northeast-1")
        ssm_client.get_parameter.assert_called_once_with(
            Name="/idmc-assist/gemini-api-key", WithDecryption=True
        )
        self.assertEqual(settings.google_api_key, "ssm-gemini-key")

    def test_unavailable_ssm_parameter_leaves_key_unset(self) -> None:
        ssm_client = Mock()
        ssm_client.get_parameter.side_effect = RuntimeError("ParameterNotFound")

        with patch.object(runtime.boto3, "client", return_value=ssm_client):
            with self.assertLogs("idmc_api.infra.runtime", level="WARNING"):
                settings = load_settings(
                    {"OPENAI_API_KEY_PARAMETER_NAME": "/idmc-assist/openai-api-key"}
                )

        self.assertIsNone(settings.openai_api_key)

    def test_rejects_non_positive_timeout(self) -> None:
        with self.assertRaises(ValueError):
            load_settings({"IDMC_ASSIST_REQUEST_TIMEOUT_SECONDS": "0"})

    def test_repr_does_not_expose_keys(self) -> None:
        settings = AssistSettings(google_api_key="very-secret")

        self.assertNotIn("very-secret", repr(settings))
        self.assertIn("google_api_key_set=True", repr(settings))


class BuildProviderBindingsTests(unittest.TestCase):
    def test_default_client_is_built_once_from_settings(self) -> None:
        settings = AssistSettings(google_api_key="default-key", request_timeout_seconds=5.0)

        with patch.object(runtime, "build_google_client", side_effect=lambda *args: Mock()) as build:
            bindings = build_provider_bindings(settings)
            first = bindings["googleai"].get_default_client()
            second = bindings["googleai"].get_default_client()

        self.assertIs(first, second)
        build.assert_called_once_with("default-key", 5.0)

    def test_scoped_clients_are_built_per_call_with_caller_key(self) -> None:
        settings = AssistSettings(google_api_key="default-key")

        with patch.object(runtime, "build_google_client", side_effect=lambda *args: Mock()) as build:
            bindings = build_provider_bindings(settings)
            first = bindings["googleai"].build_scoped_client("user-key")
            second = bindings["googleai"].build_scoped_client("user-key")

        self.assertIsNot(first, second)
        self.assertEqual(build.call_count, 2)
        build.assert_called_with("user-key", None)

    def test_missing_default_key_raises_provider_error(self) -> None:
        bindings = build_provider_bindings(AssistSettings())

        with self.assertRaisesRegex(ProviderError, "googleai"):
            bindings["googleai"].get_default_client()
        with self.assertRaisesRegex(ProviderError, "openai"):
            bindings["openai"].get_default_client()

    def test_caller_credentials_follow_provider_capabilities(self) -> None:
        bindings = build_provider_bindings(AssistSettings())

        self.assertIsNotNone(bindings["googleai"].build_scoped_client)
        self.assertIsNone(bindings["openai"].build_scoped_client)


class ClientTimeoutTests(unittest.TestCase):
    def test_google_client_receives_timeout_in_milliseconds(self) -> None:
        with patch.object(runtime.genai, "Client") as genai_client:
            client = runtime.build_google_client("gemini-key", 5.0)

        self.assertIsInstance(client, runtime.GoogleAIAnswerClient)
        kwargs = genai_client.call_args.kwargs
        self.assertEqual(kwargs["api_key"], "gemini-key")
        self.assertEqual(kwargs["http_options"].timeout, 5000)

    def test_google_client_keeps_sdk_default_without_timeout(self) -> None:
        with patch.object(runtime.genai, "Client") as genai_client:
            runtime.build_google_client("gemini-key")

        genai_client.assert_called_once_with(api_key="gemini-key", http_options=None)

    def test_openai_client_receives_timeout_in_seconds(self) -> None:
        with patch.object(runtime, "OpenAI") as openai_client:
            client = runtime.build_openai_client("openai-key", 5.0)

        self.assertIsInstance(client, runtime.OpenAIAnswerClient)
        openai_client.assert_called_once_with(api_key="openai-key", timeout=5.0)

    def test_openai_client_keeps_sdk_default_without_timeout(self) -> None:
        with patch.object(runtime, "OpenAI") as openai_client:
            runtime.build_openai_client("openai-key")

        openai_client.assert_called_once_with(api_key="openai-key")

    def test_configured_timeout_applies_to_default_and_scoped_clients(self) -> None:
        settings = load_settings(
            {
                "GEMINI_API_KEY": "default-key",
                "OPENAI_API_KEY": "openai-key",
                "IDMC_ASSIST_REQUEST_TIMEOUT_SECONDS": "5",
            }
        )

        with patch.object(runtime.genai, "Client") as genai_client, patch.object(
            runtime, "OpenAI"
        ) as openai_client:
            bindings = build_provider_bindings(settings)
            bindings["googleai"].get_default_client()
            bindings["googleai"].build_scoped_client("user-key")
            bindings["openai"].get_default_client()

        self.assertEqual(genai_client.call_count, 2)
        for call, api_key in zip(genai_client.call_args_list, ("default-key", "user-key")):
            self.assertEqual(call.kwargs["api_key"], api_key)
            self.assertEqual(call.kwargs["http_options"].timeout, 5000)
        openai_client.assert_called_once_with(api_key="openai-key", timeout=5.0)


class LangSmithConfigurationTests(unittest.TestCase):
    def test_tracing_disabled_without_key(self) -> None:
        with patch.dict(runtime.os.environ, {"LANGSMITH_TRACING": "true"}, clear=False):
            runtime._configure_langsmith(None)
            self.assertNotIn("LANGSMITH_TRACING", runtime.os.environ)

    def test_tracing_enabled_with_key(self) -> None:
        with patch.dict(runtime.os.environ, {}, clear=False):
            runtime.os.environ.pop("LANGSMITH_PROJECT", None)
            runtime._configure_langsmith("ls-key")

            self.assertEqual(runtime.os.environ["LANGSMITH_TRACING"], "true")
            self.assertEqual(runtime.os.environ["LANGSMITH_API_KEY"], "ls-key")
            self.assertEqual(runtime.os.environ["LANGSMITH_PROJECT"], "idmc-assist")

    def test_flush_is_skipped_when_tracing_disabled(self) -> None:
        with patch.dict(runtime.os.environ, {"LANGSMITH_TRACING": "false"}, clear=False):
            with patch.object(runtime, "get_cached_client") as cached_client:
                runtime.flush_langsmith_traces()

        cached_client.assert_not_called()


if __name__ == "__main__":
    unittest.main()
