"""
Server-rendered HTML for the signup, booking and dashboard forms.

Pages only format the entities they are given; every value is escaped here.
"""

from html import escape
from typing import Iterable, Mapping, Optional

from .entities import Barber, Booking, Service, Shop

STYLE = """
body{margin:0;min-height:100vh;font-family:system-ui,sans-serif;background:#050505;
color:#f5f5f5;display:flex;justify-content:center;padding:24px}
.shell{width:100%;max-width:560px}
.card{background:#0f0f10;border:1px solid #2a2a2a;border-radius:20px;padding:22px 20px}
.subtitle{font-size:.8rem;color:#9b9b9b;margin-bottom:16px}
form{display:flex;flex-direction:column;gap:10px;margin-top:8px}
form.inline{flex-direction:row;align-items:center}
label{font-size:.78rem;color:#9b9b9b}
input,textarea,select{border-radius:12px;border:1px solid #2a2a2a;background:#050505;
color:#f5f5f5;padding:9px 12px}
button{border-radius:999px;border:1px solid #fff;background:#fff;color:#000;
font-weight:600;padding:10px 16px;cursor:pointer}
.message{border-radius:12px;padding:8px 12px;font-size:.8rem}
.error{background:#2a0f0f;border:1px solid #6b2020}
.success{background:#0f2a14;border:1px solid #206b2e}
code{word-break:break-all}
"""


def _e(value) -> str:
    return escape("" if value is None else str(value))


def html_page(title: str, body: str) -> str:
    return f"""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<title>{_e(title)}</title>
<meta name="viewport" content="width=device-width,initial-scale=1" />
<style>{STYLE}</style>
</head>
<body><div class="shell"><div class="card">{body}</div></div></body>
</html>"""


def _message(message: Optional[str], kind: str = "error") -> str:
    return f'<div class="message {kind}">{_e(message)}</div>' if message else ""


def _input(label: str, name: str, values: Mapping[str, str], kind: str = "text", required: bool = False) -> str:
    req = " required" if required else ""
    return (
        f"<div><label>{_e(label)}</label>"
        f'<input type="{kind}" name="{name}" value="{_e(values.get(name, ""))}"{req} /></div>'
    )


def home_page() -> str:
    return html_page(
        "NextUp",
        """
        <h1>NextUp</h1>
        <div class="subtitle">Online bookings and walk-ins in one queue for your barbershop.</div>
        <p><a href="/signup">Set up your shop</a> · <a href="/dashboard">Owner dashboard</a></p>
        """,
    )


def not_found_page(title: str = "Shop not found") -> str:
    return html_page(
        title,
        f"""
        <h1>{_e(title)}</h1>
        <div class="subtitle">This link is not active. Ask your barber for a new booking link.</div>
        """,
    )


def signup_form(message: Optional[str] = None, values: Optional[Mapping[str, str]] = None) -> str:
    values = values or {}
    return html_page(
        "NextUp · Shop Signup",
        f"""
        <h1>Set up your shop</h1>
        <div class="subtitle">Create your NextUp link so customers can book online.</div>
        {_message(message)}
        <form method="POST" action="/signup">
          {_input("Shop name", "shopName", values, required=True)}
          {_input("Your name", "ownerName", values)}
          {_input("Contact email", "email", values, kind="email", required=True)}
          {_input("City", "city", values)}
          <button type="submit">Create my booking link</button>
        </form>
        """,
    )


def signup_success(shop: Shop, booking_url: str, api_url: str, dashboard_url: str) -> str:
    return html_page(
        "NextUp · Shop ready",
        f"""
        <h1>{_e(shop.name)} is live</h1>
        <div class="subtitle">Save these details. The admin secret is shown only once.</div>
        <p>Shop ID: <code>{_e(shop.id)}</code></p>
        <p>Admin secret: <code>{_e(shop.admin_secret)}</code></p>
        <p>Booking link: <a href="{_e(booking_url)}">{_e(booking_url)}</a></p>
        <p>Tablet API: <code>{_e(api_url)}</code></p>
        <p>Dashboard: <a href="{_e(dashboard_url)}">{_e(dashboard_url)}</a></p>
        """,
    )


def booking_form(
    shop: Shop,
    barbers: Iterable[Barber],
    services: Iterable[Service],
    message: Optional[str] = None,
    values: Optional[Mapping[str, str]] = None,
) -> str:
    values = values or {}
    barber_options = "".join(
        f'<option value="{_e(b.name)}">{_e(b.name)}</option>' for b in barbers
    )
    service_options = "".join(
        f'<option value="{_e(s.name)}">{_e(s.name)} · {s.duration_minutes} min · ${s.price:.2f}</option>'
        for s in services
    )
    return html_page(
        f"Book at {shop.name}",
        f"""
        <h1>Book at {_e(shop.name)}</h1>
        <div class="subtitle">Pick a service and a time. The shop will see you in their queue.</div>
        {_message(message)}
        <form method="POST" action="/book/{_e(shop.id)}">
          {_input("Your name", "clientName", values, required=True)}
          {_input("Phone", "clientPhone", values, kind="tel", required=True)}
          <div><label>Barber</label><select name="barberName">{barber_options}</select></div>
          <div><label>Service</label><select name="serviceName">{service_options}</select></div>
          {_input("Date", "date", values, kind="date", required=True)}
          {_input("Time", "time", values, kind="time", required=True)}
          <div><label>Notes</label><textarea name="notes">{_e(values.get("notes", ""))}</textarea></div>
          <button type="submit">Request booking</button>
        </form>
        """,
    )


def booking_thanks(shop: Shop, booking: Booking) -> str:
    return html_page(
        "Booking received",
        f"""
        <h1>You're on the list</h1>
        {_message(f"{shop.name} received your request for {booking.service_name}.", "success")}
        <p>Reference: <code>{_e(booking.id)}</code></p>
        """,
    )


def dashboard_login(message: Optional[str] = None) -> str:
    return html_page(
        "NextUp · Dashboard",
        f"""
        <h1>Owner dashboard</h1>
        <div class="subtitle">Sign in with the details you got at signup.</div>
        {_message(message)}
        <form method="POST" action="/dashboard">
          {_input("Contact email", "email", {}, kind="email", required=True)}
          {_input("Shop ID", "shopId", {}, required=True)}
          {_input("Admin secret", "adminSecret", {}, kind="password", required=True)}
          <button type="submit">Open dashboard</button>
        </form>
        """,
    )


def _service_row(shop: Shop, service: Service) -> str:
    state = "active" if service.is_active else "hidden"
    return f"""
    <li>{_e(service.name)} ({state})
      <form class="inline" method="POST" action="/dashboard/shops/{_e(shop.id)}/services/update">
        <input type="hidden" name="serviceId" value="{_e(service.id)}" />
        <input name="durationMinutes" value="{service.duration_minutes}" size="4" />
        <input name="price" value="{service.price:.2f}" size="6" />
        <select name="isActive">
          <option value="true"{" selected" if service.is_active else ""}>Active</option>
          <option value="false"{"" if service.is_active else " selected"}>Hidden</option>
        </select>
        <button type="submit">Save</button>
      </form>
    </li>"""


def dashboard_shop(
    shop: Shop,
    barbers: Iterable[Barber],
    services: Iterable[Service],
    bookings: Iterable[Booking],
    message: Optional[str] = None,
) -> str:
    barber_rows = "".join(
        f"""
        <li>{_e(b.name)}
          <form class="inline" method="POST" action="/dashboard/shops/{_e(shop.id)}/barbers/delete">
            <input type="hidden" name="barberId" value="{_e(b.id)}" />
            <button type="submit">Remove</button>
          </form>
        </li>"""
        for b in barbers
    )
    service_rows = "".join(_service_row(shop, s) for s in services)
    booking_rows = "".join(
        f"<li>{_e(b.scheduled_at.isoformat())} · {_e(b.client_name)} · "
        f"{_e(b.service_name)} · {_e(b.barber_name or 'Any barber')} · {_e(b.status.value)}</li>"
        for b in bookings
    ) or "<li>No bookings yet.</li>"
    return html_page(
        f"{shop.name} · Dashboard",
        f"""
        <h1>{_e(shop.name)}</h1>
        <div class="subtitle">Shop ID <code>{_e(shop.id)}</code> · {_e(shop.subscription_status)}</div>
        {_message(message)}
        <h2>Barbers</h2>
        <ul>{barber_rows}</ul>
        <form method="POST" action="/dashboard/shops/{_e(shop.id)}/barbers/add">
          {_input("New barber", "name", {})}
          <button type="submit">Add barber</button>
        </form>
        <h2>Services</h2>
        <ul>{service_rows}</ul>
        <form method="POST" action="/dashboard/shops/{_e(shop.id)}/services/add">
          {_input("Service name", "name", {})}
          {_input("Minutes", "durationMinutes", {})}
          {_input("Price", "price", {})}
          <button type="submit">Add service</button>
        </form>
        <h2>Bookings</h2>
        <ul>{booking_rows}</ul>
        """,
    )
