from __future__ import annotations

import base64

import pytest

CA_BYTES = b"ca-bytes"
CA_B64 = base64.b64encode(CA_BYTES).decode()

LOCAL_KUBECONFIG = """\
apiVersion: v1
kind: Config
current-context: prod
preferences: {}
clusters:
- name: prod-cluster
  cluster:
    server: https://old.example:6443
- name: dev-cluster
  cluster:
    server: https://dev.example:6443
    insecure-skip-tls-verify: true
contexts:
- name: prod
  context:
    cluster: prod-cluster
    user: prod-user
- name: dev
  context:
    cluster: dev-cluster
    user: dev-user
    namespace: sandbox
users:
- name: prod-user
  user:
    token: tok-old-aaaa
- name: dev-user
  user:
    token: dev-token
"""

PASTED_KUBECONFIG = f"""\
apiVersion: v1
kind: Config
current-context: prod-paste
clusters:
- name: prod-cluster
  cluster:
    server: https://new.example:6443
    certificate-authority-data: {CA_B64}
contexts:
- name: prod-paste
  context:
    cluster: prod-cluster
    user: prod-user2
users:
- name: prod-user2
  user:
    token: tok-new-bbbb
"""


def _answer(value):
    if isinstance(value, BaseException):
        raise value
    return value


class ScriptedPrompter:
    """Answers prompts from pre-recorded responses and records every call.

    A recorded exception is raised instead of being returned.
    """

    def __init__(self, selects=(), texts=(), confirms=(), paste=""):
        self.selects = list(selects)
        self.texts = list(texts)
        self.confirms = list(confirms)
        self.pasted = paste
        self.calls: list[tuple] = []
        self.warnings: list[str] = []

    def select(self, title, options):
        self.calls.append(("select", title, list(options)))
        choice = _answer(self.selects.pop(0))
        assert choice in options, f"{choice!r} not offered in {options!r}"
        return choice

    def text(self, title):
        self.calls.append(("text", title))
        return _answer(self.texts.pop(0))

    def confirm(self, title):
        self.calls.append(("confirm", title))
        return _answer(self.confirms.pop(0))

    def paste(self, title):
        self.calls.append(("paste", title))
        return _answer(self.pasted)

    def warn(self, message):
        self.warnings.append(message)

    def titles(self, kind):
        return [call[1] for call in self.calls if call[0] == kind]


@pytest.fixture
def local_path(tmp_path):
    path = tmp_path / "config"
    path.write_text(LOCAL_KUBECONFIG)
    return path
