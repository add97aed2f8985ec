# tests/test_payload.py
import os
import shlex
import shutil
import socket
import subprocess

import pytest

from netcheck.brain.rules import FAILURE_MESSAGE
from netcheck.payload import build_payload, parse_report
from netcheck.schemas import ProbeRequest


def test_payload_carries_request_values():
    req = ProbeRequest(hosts=("10.0.0.5", "db01.example.com"), port=5432, protocol="tcp", timeout_s=4)
    script = build_payload(req)
    assert script.startswith("#!/bin/sh\n")
    assert "HOSTS='10.0.0.5 db01.example.com'\n" in script
    assert "PORT=5432\n" in script
    assert "PROTO=tcp\n" in script
    assert "TIMEOUT=4\n" in script
    assert f"echo {shlex.quote(FAILURE_MESSAGE)}" in script
    assert 'exit "$rc"' in script


def test_payload_keeps_fallback_order():
    script = build_payload(ProbeRequest(hosts=("a",), port=53, protocol="udp"))
    nc = script.index("nc -u -z")
    bounded = script.index('timeout "$TIMEOUT" bash -c \'printf')
    bare = script.index("            bash -c 'printf")
    assert nc < bounded < bare
    assert "UDP_PAYLOAD=test\n" in script


def test_parse_report_reads_verdict_lines_only():
    text = "\n".join([
        "Testing connectivity...",
        "PASS: 10.0.0.5:443/tcp",
        "FAIL: db01:443/tcp",
        "PASS: ::1:443/tcp",
        FAILURE_MESSAGE,
        "",
    ])
    rows = parse_report(text)
    assert [(r.host, r.port, r.protocol, r.outcome) for r in rows] == [
        ("10.0.0.5", 443, "tcp", "PASS"),
        ("db01", 443, "tcp", "FAIL"),
        ("::1", 443, "tcp", "PASS"),
    ]


def test_parse_report_empty():
    assert parse_report("") == []
    assert parse_report(None) == []


SH = shutil.which("sh")
BASH = shutil.which("bash")
TIMEOUT = shutil.which("timeout")

needs_shell = pytest.mark.skipif(not (SH and BASH), reason="sh and bash are required")


@pytest.fixture
def tcp_listener():
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.bind(("127.0.0.1", 0))
    srv.listen(8)
    yield srv.getsockname()[1]
    srv.close()


@pytest.fixture
def closed_port():
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


def guest_bin(tmp_path, **tools):
    """A PATH directory holding only the given tools, to pin the fallback tier."""
    d = tmp_path / "bin"
    d.mkdir(exist_ok=True)
    for name, target in tools.items():
        os.symlink(target, d / name)
    return d


def run_guest(tmp_path, req, path_dir):
    script = tmp_path / "check.sh"
    script.write_text(build_payload(req))
    env = dict(os.environ, PATH=str(path_dir))
    proc = subprocess.run([SH, str(script)], env=env, capture_output=True, text=True, timeout=30)
    return proc.returncode, proc.stdout.splitlines()


@needs_shell
@pytest.mark.skipif(not TIMEOUT, reason="timeout is required")
def test_guest_script_timeout_tier(tmp_path, tcp_listener, closed_port):
    path_dir = guest_bin(tmp_path, bash=BASH, timeout=TIMEOUT)

    req = ProbeRequest(hosts=("127.0.0.1", "127.0.0.1"), port=tcp_listener, timeout_s=2)
    rc, lines = run_guest(tmp_path, req, path_dir)
    assert rc == 0
    assert lines == [f"PASS: 127.0.0.1:{tcp_listener}/tcp"] * 2

    req = ProbeRequest(hosts=("127.0.0.1", "127.0.0.1"), port=closed_port, timeout_s=2)
    rc, lines = run_guest(tmp_path, req, path_dir)
    assert rc == 1
    assert lines == [f"FAIL: 127.0.0.1:{closed_port}/tcp"] * 2 + [FAILURE_MESSAGE]


@needs_shell
def test_guest_script_bare_bash_tier(tmp_path, tcp_listener, closed_port):
    path_dir = guest_bin(tmp_path, bash=BASH)

    req = ProbeRequest(hosts=("127.0.0.1", "127.0.0.1"), port=tcp_listener, timeout_s=2)
    rc, lines = run_guest(tmp_path, req, path_dir)
    assert (rc, lines) == (0, [f"PASS: 127.0.0.1:{tcp_listener}/tcp"] * 2)

    req = ProbeRequest(hosts=("127.0.0.1", "127.0.0.1"), port=closed_port, timeout_s=2)
    rc, lines = run_guest(tmp_path, req, path_dir)
    assert rc == 1
    assert lines[-1] == FAILURE_MESSAGE


@needs_shell
def test_guest_script_nc_tier_ends_options_before_host(tmp_path):
    args_file = tmp_path / "nc.args"
    fake_nc = tmp_path / "fake_nc"
    fake_nc.write_text(f"#!{SH}\nprintf '%s\\n' \"$@\" > {shlex.quote(str(args_file))}\nexit 0\n")
    fake_nc.chmod(0o755)
    path_dir = guest_bin(tmp_path, nc=str(fake_nc), bash=BASH)

    req = ProbeRequest(hosts=("db01",), port=5432, timeout_s=2)
    rc, lines = run_guest(tmp_path, req, path_dir)
    assert (rc, lines) == (0, ["PASS: db01:5432/tcp"])
    assert args_file.read_text().splitlines() == ["-z", "-w", "2", "--", "db01", "5432"]


def test_payload_timeout_tier_needs_bash_too():
    script = build_payload(ProbeRequest(hosts=("a",), port=80))
    assert script.count("elif have timeout && have bash; then") == 2
    assert 'nc -z -w "$TIMEOUT" -- "$h"' in script
    assert 'nc -u -z -w "$TIMEOUT" -- "$h"' in script
