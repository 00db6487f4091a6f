from unittest.mock import MagicMock

from repokit.github.client import GitHubCLI
from repokit.secrets import apply_secrets, apply_variables, match_repository, plan_upload


def test_plan_skips_template_values():
    plan = plan_upload(
        {
            "DEVELOPMENT_TEAM": "YOUR_TEAM_ID",
            "APP_STORE_CONNECT_KEY_ID": "KEY123",
            "APPLE_ID": "",
            "PROJECT_NAME": "MyApp",
            "DISPLAY_NAME": "Weather",
            "PRODUCT_BUNDLE_IDENTIFIER": "com.yourcompany.weather",
            "GITHUB_REPOSITORY_OWNER": "acme",
        }
    )

    assert plan.secrets == {"APP_STORE_CONNECT_KEY_ID": "KEY123"}
    assert plan.variables == {"DISPLAY_NAME": "Weather", "GITHUB_REPOSITORY_OWNER": "acme"}
    assert "DEVELOPMENT_TEAM" in plan.skipped
    assert "APPLE_ID" in plan.skipped
    assert "PROJECT_NAME" in plan.skipped
    assert "PRODUCT_BUNDLE_IDENTIFIER" in plan.skipped


def test_apply_continues_after_failure():
    gh = MagicMock(spec=GitHubCLI)
    gh.secret_set.side_effect = [False, True]

    result = apply_secrets(gh, {"APPLE_ID": "a@b.io", "MATCH_PASSWORD": "pw"})

    assert result.failed == ["APPLE_ID"]
    assert result.uploaded == ["MATCH_PASSWORD"]


def test_apply_variables():
    gh = MagicMock(spec=GitHubCLI)
    gh.variable_set.return_value = True

    result = apply_variables(gh, {"SWIFT_VERSION": "5.9"})

    gh.variable_set.assert_called_once_with("SWIFT_VERSION", "5.9")
    assert result.uploaded == ["SWIFT_VERSION"]


def test_match_repository():
    assert match_repository("git@github.com:acme/certificates.git") == "acme/certificates"
    assert match_repository("https://github.com/acme/certificates") == "acme/certificates"
    assert match_repository("https://github.com/yourusername/certificates.git") is None
    assert match_repository("https://gitlab.com/acme/certificates.git") is None
    assert match_repository("") is None
