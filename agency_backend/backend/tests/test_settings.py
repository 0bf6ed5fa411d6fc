import importlib

from django.test import SimpleTestCase


class DevSettingsTests(SimpleTestCase):
    def setUp(self):
        self.dev = importlib.import_module("backend.settings.dev")

    def test_money_loggers_are_verbose_locally(self):
        loggers = self.dev.LOGGING["loggers"]

        self.assertEqual(loggers["billing"]["level"], self.dev.DEV_LOG_LEVEL)
        self.assertEqual(loggers["ledger"]["level"], self.dev.DEV_LOG_LEVEL)
        self.assertEqual(loggers["reports"]["level"], self.dev.LOG_LEVEL)

    def test_base_logging_is_left_untouched(self):
        base = importlib.import_module("backend.settings.base")

        self.assertEqual(base.LOGGING["loggers"]["billing"]["level"], base.LOG_LEVEL)

    def test_browsable_api_on_top_of_base_drf_settings(self):
        renderers = self.dev.REST_FRAMEWORK["DEFAULT_RENDERER_CLASSES"]

        self.assertIn("rest_framework.renderers.BrowsableAPIRenderer", renderers)
        self.assertIn(
            "rest_framework_simplejwt.authentication.JWTAuthentication",
            self.dev.REST_FRAMEWORK["DEFAULT_AUTHENTICATION_CLASSES"],
        )
