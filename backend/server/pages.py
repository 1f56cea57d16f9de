"""
Static HTML served by the facade.

No templating engine: the pages are small and only the QR page has a
dynamic part (the image data URI).
"""

from __future__ import annotations

from html import escape


NO_QR_PAGE = "<h2>🤖 No QR Code available. Please wait or refresh.</h2>"

QR_RENDER_FAILED_PAGE = "Failed to generate QR"


def qr_page(image_data_uri: str) -> str:
    return f"""
      <div style="text-align:center;">
        <h2>📲 Scan this QR Code to login WhatsApp</h2>
        <img src="{escape(image_data_uri, quote=True)}" />
      </div>
    """


SEND_FORM_PAGE = """
    <html>
      <head>
        <title>Send WhatsApp Message</title>
        <style>
          body { font-family: Arial; padding: 20px; }
          input, textarea { width: 300px; padding: 10px; margin: 10px 0; }
          button { padding: 10px 20px; }
        </style>
      </head>
      <body>
        <h2>📤 Send WhatsApp Message</h2>
        <form method="POST" action="/send" onsubmit="return sendMessage(event)">
          <label>Mobile Number (with country code):</label><br />
          <input type="text" id="number" placeholder="91XXXXXXXXXX" required /><br />
          <label>Message:</label><br />
          <textarea id="message" rows="4" placeholder="Type your message..." required></textarea><br />
          <button type="submit">Send</button>
        </form>
        <div id="response" style="margin-top: 20px;"></div>

        <script>
          async function sendMessage(event) {
            event.preventDefault();
            const number = document.getElementById('number').value;
            const message = document.getElementById('message').value;
            const responseDiv = document.getElementById('response');

            try {
              const res = await fetch('/send-message', {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify({ number, message })
              });
              const data = await res.json();

              if (res.ok) {
                responseDiv.innerHTML = '<span style="color: green;">✅ Message sent! ID: ' + data.id + '</span>';
              } else {
                responseDiv.innerHTML = '<span style="color: red;">❌ Error: ' + (data.error || 'Failed') + '</span>';
              }
            } catch (err) {
              responseDiv.innerHTML = '<span style="color: red;">❌ Request failed</span>';
            }
          }
        </script>
      </body>
    </html>
"""
