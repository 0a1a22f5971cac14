import pytest

from comida import main


class FakeSocket:
    def __init__(self, address=None, error=None):
        self.address = address
        self.error = error
        self.connected_to = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def connect(self, target):
        if self.error is not None:
            raise self.error
        self.connected_to = target

    def getsockname(self):
        return (self.address, 54321)


@pytest.fixture
def fake_socket(monkeypatch):
    def install(**kwargs):
        sock = FakeSocket(**kwargs)
        monkeypatch.setattr(main.socket, "socket", lambda *args: sock)
        return sock
    return install


@pytest.mark.parametrize("host", ["127.0.0.1", "localhost", "::1"])
def test_loopback_bind_has_no_lan_address(host, fake_socket):
    sock = fake_socket(address="192.168.1.20")
    assert main.lan_address(host) is None
    assert sock.connected_to is None


def test_specific_bind_is_returned_as_is(fake_socket):
    fake_socket(address="192.168.1.20")
    assert main.lan_address("10.0.0.7") == "10.0.0.7"


def test_wildcard_bind_uses_outgoing_interface(fake_socket):
    sock = fake_socket(address="192.168.1.20")
    assert main.lan_address("0.0.0.0") == "192.168.1.20"
    assert sock.connected_to == ("192.0.2.1", 80)


def test_wildcard_bind_without_network(fake_socket):
    fake_socket(error=OSError("Network is unreachable"))
    assert main.lan_address("0.0.0.0") is None


def test_wildcard_bind_resolving_to_loopback(fake_socket):
    fake_socket(address="127.0.1.1")
    assert main.lan_address("::") is None
