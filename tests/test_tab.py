import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from tvchartkit.tab import TabSwitchError, filter_tradingview_tabs, switch_tab


class _ActivateHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        if self.path == "/json/activate/known":
            status, body = 200, b"Target activated"
        elif self.path == "/json/activate/accepted":
            status, body = 202, b"Accepted"
        else:
            status, body = 404, b"No such target id\n"
        self.send_response(status)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def server_port():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _ActivateHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server.server_address[1]
    server.shutdown()
    server.server_close()


def test_switch_tab_empty_id():
    with pytest.raises(TabSwitchError, match="tab_id is required"):
        switch_tab("")


def test_switch_tab_success(server_port):
    result = switch_tab("known", host="127.0.0.1", port=server_port)
    assert result == {"success": True, "activated_tab_id": "known"}


def test_switch_tab_unknown_target(server_port):
    with pytest.raises(TabSwitchError, match=r"activate failed \(status 404\): No such target id$"):
        switch_tab("missing", host="127.0.0.1", port=server_port)


def test_switch_tab_requires_status_200(server_port):
    with pytest.raises(TabSwitchError, match="status 202"):
        switch_tab("accepted", host="127.0.0.1", port=server_port)


def test_filter_tradingview_tabs():
    targets = [
        {"id": "A", "type": "page", "title": "Chart", "url": "https://www.TradingView.com/chart/"},
        {"id": "B", "type": "page", "title": "Other", "url": "https://example.com/"},
        {"id": "C", "type": "service_worker", "title": "SW", "url": "https://tradingview.com/sw.js"},
        {"id": "D", "type": "page", "title": "Second", "url": "https://tradingview.com/chart/x"},
    ]
    assert filter_tradingview_tabs(targets) == [
        {"id": "A", "title": "Chart", "url": "https://www.TradingView.com/chart/"},
        {"id": "D", "title": "Second", "url": "https://tradingview.com/chart/x"},
    ]


def test_filter_tradingview_tabs_empty():
    assert filter_tradingview_tabs([]) == []