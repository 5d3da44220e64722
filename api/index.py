from http.server import BaseHTTPRequestHandler
import sys
import os

# repo root, so the backend package resolves without installation
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from fuel_backend.app import gateway


class handler(BaseHTTPRequestHandler):
    def _send_page(self, view):
        page = gateway.render(view).encode('utf-8')
        self.send_response(200)
        self.send_header('Content-type', 'text/html; charset=utf-8')
        self.send_header('Content-Length', str(len(page)))
        self.end_headers()
        self.wfile.write(page)

    def do_GET(self):
        """Blank form"""
        self._send_page(gateway.handle('GET'))

    def do_POST(self):
        """Form submission: results or validation error"""
        content_length = int(self.headers.get('Content-Length', 0))
        body = self.rfile.read(content_length)
        self._send_page(gateway.handle('POST', gateway.parse_form_body(body)))
