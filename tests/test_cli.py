import aiohttp
import pytest

from fastmile import Credentials, GatewayConfig
from fastmile.cli import cli
from fastmile.gatewayconfig import load_config, save_config
from fastmile.json import loads as json_loads

from .fakegateway import DETAILED_STATUS, MOCK_PWD, MOCK_SID, MOCK_TOKEN, MOCK_USER

LOGIN_STEPS = ["nonce", "salt", "login"]


@pytest.fixture()
def config_file(tmp_path):
    return tmp_path / "config.json"


@pytest.fixture()
def base_args(config_file):
    return ["--host", "127.0.0.1", "--config-file", str(config_file)]


@pytest.fixture()
def auth_args(base_args):
    return [*base_args, "--username", MOCK_USER, "--password", MOCK_PWD]


async def test_status_without_credentials(mock_gateway, runner, base_args):
    res = await runner.invoke(cli, [*base_args, "status"])

    assert res.exit_code == 0, res.output
    assert "Connection Status" in res.output
    assert "n78" in res.output
    assert mock_gateway.steps == ["detailed_status"]


async def test_status_is_default_command(mock_gateway, runner, base_args):
    res = await runner.invoke(cli, base_args)

    assert res.exit_code == 0, res.output
    assert "5G Cell Stats" in res.output
    assert mock_gateway.steps == ["detailed_status"]


async def test_status_logs_in(mock_gateway, runner, auth_args):
    res = await runner.invoke(cli, [*auth_args, "status"])

    assert res.exit_code == 0, res.output
    assert mock_gateway.steps == [*LOGIN_STEPS, "detailed_status"]
    assert mock_gateway.requests[-1]["cookies"] == {"sid": MOCK_SID}


async def test_status_failed_login_continues(mock_gateway, runner, base_args):
    mock_gateway.password = "other"
    args = [*base_args, "-u", MOCK_USER, "-p", MOCK_PWD, "status"]

    res = await runner.invoke(cli, args)

    assert res.exit_code == 0, res.output
    assert "Login failed" in res.output
    assert mock_gateway.steps == [*LOGIN_STEPS, "detailed_status"]


@pytest.mark.parametrize(
    ("section", "expected"),
    [
        ("all", DETAILED_STATUS),
        ("5g", {"cell_5G_stats_cfg": DETAILED_STATUS["cell_5G_stats_cfg"]}),
        ("lte", {"cell_LTE_stats_cfg": DETAILED_STATUS["cell_LTE_stats_cfg"]}),
    ],
)
async def test_status_json_format(mock_gateway, runner, base_args, section, expected):
    res = await runner.invoke(
        cli, [*base_args, "status", "--format", "json", "--filter", section]
    )

    assert res.exit_code == 0, res.output
    assert json_loads(res.output) == expected


async def test_status_compact_legacy(mock_gateway, runner, base_args):
    mock_gateway.detailed_status = False

    res = await runner.invoke(cli, [*base_args, "status", "-f", "compact"])

    assert res.exit_code == 0, res.output
    assert "WAN: UP" in res.output
    assert "100.64.1.2" in res.output
    assert "5G:" not in res.output


async def test_status_invalid_filter(mock_gateway, runner, base_args):
    res = await runner.invoke(cli, [*base_args, "status", "--filter", "wifi"])

    assert res.exit_code == 2
    assert mock_gateway.requests == []


async def test_login(mock_gateway, runner, auth_args, config_file):
    res = await runner.invoke(cli, [*auth_args, "login"])

    assert res.exit_code == 0, res.output
    assert MOCK_SID in res.output
    assert MOCK_TOKEN in res.output
    assert "Connection Status" in res.output
    assert mock_gateway.steps == [*LOGIN_STEPS, "detailed_status"]
    assert not config_file.exists()


async def test_login_save_config(mock_gateway, runner, auth_args, config_file):
    res = await runner.invoke(cli, [*auth_args, "login", "--save-config"])

    assert res.exit_code == 0, res.output
    assert "Configuration saved" in res.output
    stored = GatewayConfig.from_dict(load_config(config_file))
    assert stored.host == "127.0.0.1"
    assert stored.credentials == Credentials(MOCK_USER, MOCK_PWD)


async def test_stored_credentials_are_used(mock_gateway, runner, config_file):
    config = GatewayConfig("127.0.0.1", credentials=Credentials(MOCK_USER, MOCK_PWD))
    save_config(config, config_file)

    res = await runner.invoke(cli, ["--config-file", str(config_file), "login"])

    assert res.exit_code == 0, res.output
    assert mock_gateway.steps == [*LOGIN_STEPS, "detailed_status"]


async def test_credentials_from_environment(mock_gateway, runner, base_args):
    res = await runner.invoke(
        cli,
        [*base_args, "login"],
        env={"FASTMILE_USERNAME": MOCK_USER, "FASTMILE_PASSWORD": MOCK_PWD},
    )

    assert res.exit_code == 0, res.output
    assert MOCK_SID in res.output


async def test_login_without_credentials(mock_gateway, runner, base_args):
    res = await runner.invoke(cli, [*base_args, "login"])

    assert res.exit_code == 1
    assert "Username and password are required" in res.output
    assert mock_gateway.requests == []


async def test_login_rejected(mock_gateway, runner, auth_args):
    mock_gateway.password = "other"

    res = await runner.invoke(cli, [*auth_args, "login"])

    assert res.exit_code == 1
    assert "Login rejected" in res.output
    assert mock_gateway.steps == LOGIN_STEPS


async def test_reconnect(mock_gateway, runner, auth_args):
    res = await runner.invoke(
        cli, [*auth_args, "reconnect", "--apn", "fast.apn", "--wait", "0"]
    )

    assert res.exit_code == 0, res.output
    assert "Reconnection successful" in res.output
    assert mock_gateway.steps == [
        *LOGIN_STEPS,
        "service",
        "service",
        "detailed_status",
    ]
    down, up = (r["json"]["paralist"][0] for r in mock_gateway.requests[3:5])
    assert (down["AccessPointName"], down["INTERNET"]) == ("fast.apn", False)
    assert (up["AccessPointName"], up["INTERNET"]) == ("fast.apn", True)


async def test_reconnect_rejected(mock_gateway, runner, auth_args):
    mock_gateway.control_status = 403

    res = await runner.invoke(cli, [*auth_args, "reconnect"])

    assert res.exit_code == 1
    assert "Gateway rejected the request" in res.output
    assert mock_gateway.steps == [*LOGIN_STEPS, "service"]


@pytest.mark.parametrize("command", ["reboot", "restart"])
async def test_reboot(mock_gateway, runner, auth_args, command):
    res = await runner.invoke(cli, [*auth_args, command])

    assert res.exit_code == 0, res.output
    assert "Gateway is rebooting" in res.output
    assert mock_gateway.steps == [*LOGIN_STEPS, "reboot"]


async def test_reboot_connection_dropped(mock_gateway, runner, auth_args):
    mock_gateway.overrides["reboot"] = aiohttp.ServerDisconnectedError()

    res = await runner.invoke(cli, [*auth_args, "reboot"])

    assert res.exit_code == 0, res.output
    assert "reboot is in progress" in res.output


@pytest.mark.parametrize(
    ("error", "message"),
    [
        pytest.param(
            aiohttp.ServerTimeoutError(),
            "Gateway did not answer in time",
            id="timeout",
        ),
        pytest.param(
            aiohttp.ServerDisconnectedError(),
            "Unable to reach the gateway",
            id="disconnected",
        ),
        pytest.param(
            b"<html>", "Unexpected response from the gateway", id="not-json"
        ),
    ],
)
async def test_errors_are_reported(mock_gateway, runner, auth_args, error, message):
    mock_gateway.overrides["nonce"] = error

    res = await runner.invoke(cli, [*auth_args, "reboot"])

    assert res.exit_code == 1
    assert message in res.output
    assert "--debug" in res.output
    assert mock_gateway.steps == ["nonce"]


async def test_debug_raises(mock_gateway, runner, auth_args):
    mock_gateway.overrides["nonce"] = aiohttp.ServerTimeoutError()

    res = await runner.invoke(cli, [*auth_args, "--debug", "reboot"])

    assert res.exit_code == 1
    assert isinstance(res.exception, TimeoutError)


async def test_config_missing(runner, base_args):
    res = await runner.invoke(cli, [*base_args, "config"])

    assert res.exit_code == 0, res.output
    assert "No configuration file found" in res.output


async def test_config(runner, base_args, config_file):
    config = GatewayConfig(
        "10.0.0.138",
        credentials=Credentials(MOCK_USER, "secret"),
        apn="fast.apn",
    )
    save_config(config, config_file)

    res = await runner.invoke(cli, [*base_args, "config"])

    assert res.exit_code == 0, res.output
    assert "Username: admin" in res.output
    assert "********" in res.output
    assert "secret" not in res.output
    assert "APN: fast.apn" in res.output

    res = await runner.invoke(cli, [*base_args, "--json", "config"])

    assert res.exit_code == 0, res.output
    stored = json_loads(res.output)
    assert stored["credentials"] == {"username": MOCK_USER, "password": "********"}
    assert stored["host"] == "10.0.0.138"


class _StopWatch(Exception):
    pass


async def test_status_watch(mock_gateway, runner, base_args, mocker):
    refreshes = 0

    async def _sleep(interval):
        nonlocal refreshes
        assert interval == 3
        refreshes += 1
        if refreshes == 1:
            mock_gateway.overrides["detailed_status"] = aiohttp.ServerTimeoutError()
            mock_gateway.overrides["legacy_status"] = aiohttp.ServerTimeoutError()
        else:
            raise _StopWatch

    mocker.patch("asyncio.sleep", side_effect=_sleep)

    res = await runner.invoke(cli, [*base_args, "status", "--watch", "-i", "3"])

    assert res.exit_code == 1
    assert res.output.count("Last updated") == 2
    assert "Connection Status" in res.output
    assert "Gateway did not answer in time" in res.output
    assert mock_gateway.steps == [
        "detailed_status",
        "detailed_status",
        "legacy_status",
    ]


@pytest.mark.parametrize("use_env", [False, True], ids=("option", "env"))
async def test_status_path(mock_gateway, runner, base_args, use_env):
    mock_gateway.detailed_status = False
    if use_env:
        args, env = [*base_args, "status"], {"FASTMILE_PATH": "/fastmile.cgi"}
    else:
        args, env = [*base_args, "--path", "/fastmile.cgi", "status"], None

    res = await runner.invoke(cli, args, env=env)

    assert res.exit_code == 0, res.output
    assert mock_gateway.steps == ["detailed_status", "legacy_status"]
    assert mock_gateway.requests[1]["url"].path == "/fastmile.cgi"


async def test_status_needs_password_to_log_in(mock_gateway, runner, base_args):
    res = await runner.invoke(cli, [*base_args, "-u", MOCK_USER, "status"])

    assert res.exit_code == 0, res.output
    assert mock_gateway.steps == ["detailed_status"]
