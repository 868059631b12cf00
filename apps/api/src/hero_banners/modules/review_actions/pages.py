"""
Review Actions HTML Pages

Server-rendered pages for reviewers: the compose form opened from an email
link, and the confirmation shown after sending. Every interpolated value is
HTML-escaped; payload fields come from the link and are user-supplied.
"""

from html import escape

_PAGE_STYLES = """
            body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Arial, sans-serif; max-width: 720px; margin: 24px auto; padding: 0 16px; color: #111827; }
            .card { border: 1px solid #e5e7eb; border-radius: 8px; overflow: hidden; }
            .card-header { background: #0f3d6e; color: #ffffff; padding: 16px 20px; }
            .card-header h2 { margin: 0; font-size: 18px; }
            .card-body { padding: 20px; }
            .notice { background: #f1f5f9; padding: 12px; border-radius: 6px; margin: 16px 0; font-size: 14px; }
            label { display: block; margin-bottom: 6px; font-weight: 600; }
            input[type=text], textarea { width: 100%; padding: 10px; border: 1px solid #e5e7eb; border-radius: 6px; margin-bottom: 12px; box-sizing: border-box; }
            .button { background: #0f3d6e; color: #ffffff; padding: 10px 16px; border: 0; border-radius: 6px; cursor: pointer; text-decoration: none; display: inline-block; }
            ul.recipients { margin: 8px 0 0 0; padding-left: 16px; color: #4b5563; }
"""


def _document(title: str, content: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8" />
        <meta name="viewport" content="width=device-width, initial-scale=1" />
        <title>{escape(title)}</title>
        <style>{_PAGE_STYLES}</style>
    </head>
    <body>
        <div class="card">
        {content}
        </div>
    </body>
    </html>
    """


def review_page(
    *,
    heading: str,
    greeting_name: str,
    sponsor_name: str,
    sponsor_email: str,
    veteran_name: str,
    copy_to: str,
    submit_url: str,
    hidden_fields: dict[str, str],
    subject: str,
    body: str,
) -> str:
    """Compose form posting the (possibly edited) message to the dispatch endpoint."""
    hidden = "\n".join(
        f'                <input type="hidden" name="{escape(name)}" value="{escape(value)}" />'
        for name, value in hidden_fields.items()
    )
    content = f"""
            <div class="card-header">
                <h2>{escape(heading)}</h2>
            </div>
            <div class="card-body">
                <p>Hi <strong>{escape(greeting_name)}</strong>, you are composing a message to the banner applicant <strong>{escape(sponsor_name)}</strong> about the banner for <strong>{escape(veteran_name)}</strong>.</p>

                <div class="notice">
                    <p style="margin: 0 0 4px 0; font-weight: 600;">Notice</p>
                    <p style="margin: 0;">When you send this message, it will go to <strong>{escape(sponsor_name)} &lt;{escape(sponsor_email)}&gt;</strong> and a copy will be sent to <strong>{escape(copy_to)}</strong>.</p>
                </div>

                <form method="POST" action="{escape(submit_url)}">
{hidden}

                    <label for="subject">Subject</label>
                    <input type="text" id="subject" name="subject" value="{escape(subject)}" />

                    <label for="body">Message</label>
                    <textarea id="body" name="body" rows="10">{escape(body)}</textarea>

                    <button type="submit" class="button">Send</button>
                </form>
            </div>
    """
    return _document("Hometown Heroes Review", content)


def dispatch_success_page(
    applicant: list[str],
    sender: str,
    groups_notified: list[str],
) -> str:
    """Confirmation listing everyone the message went to."""
    items = [f"<li><strong>Applicant</strong>: {escape(', '.join(applicant))}</li>"]
    if sender:
        items.append(f"<li><strong>Sender</strong>: {escape(sender)}</li>")
    if groups_notified:
        items.append(f"<li><strong>Groups Notified</strong>: {escape(', '.join(groups_notified))}</li>")

    content = f"""
            <div class="card-header">
                <h2>Message sent</h2>
            </div>
            <div class="card-body">
                <p>Your message has been sent successfully.</p>
                <ul class="recipients">
                    {"".join(items)}
                </ul>
                <p style="margin-top: 16px;"><a href="/" class="button">Back to site</a></p>
            </div>
    """
    return _document("Message Sent", content)
