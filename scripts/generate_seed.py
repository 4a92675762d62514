"""Generate mock repair tickets for the DeviceDesk demo."""

import csv
import random
from datetime import date, timedelta
from pathlib import Path

STATUSES = ["Received", "Processing", "Returned"]
DEVICE_TYPES = ["Codec", "Mic", "Camera", "Source/Power", "Control", "Other"]
SHIPPING_METHODS = ["Viettel Post", "Giao Hang Nhanh", "Giao Hang Tiet Kiem", "Taxi", "Bus", "Direct"]
ORGANIZATIONS = [
    "Bach Mai Hospital",
    "Cho Ray Hospital",
    "Hue Central Hospital",
    "Da Nang Department of Health",
    "Vinmec Times City",
]
CUSTOMERS = [
    "Nguyen Van An",
    "Tran Thi Binh",
    "Le Hoang Cuong",
    "Pham Minh Duc",
    "Vo Thi Hoa",
    "Dang Quoc Huy",
    "Bui Thu Lan",
    "Do Thanh Nam",
]
CONDITIONS = ["No power", "No video output", "Audio crackling", "Cracked housing", "Firmware loop", "Normal"]

rows = []
today = date(2025, 1, 15)
random.seed(42)
customer_orgs = {name: random.choice(ORGANIZATIONS) for name in CUSTOMERS}
serials = [f"SN{idx:05d}" for idx in range(1, 41)]
for idx in range(1, 121):
    customer = random.choice(CUSTOMERS)
    status = random.choices(STATUSES, weights=[3, 4, 5])[0]
    receive_date = today - timedelta(days=random.randint(0, 240))
    returned = status == "Returned"
    shipping = random.choice(SHIPPING_METHODS) if returned else ""
    rows.append(
        {
            "organization": customer_orgs[customer],
            "customer": customer,
            "phone": f"09{random.randint(10000000, 99999999)}",
            "device_type": random.choices(DEVICE_TYPES, weights=[3, 5, 6, 2, 2, 1])[0],
            "serial_number": random.choice(serials) if random.random() < 0.8 else "",
            "device_condition": random.choice(CONDITIONS),
            "receive_date": receive_date.isoformat(),
            "status": status,
            "return_date": (receive_date + timedelta(days=random.randint(3, 20))).isoformat() if returned else "",
            "shipping_method": shipping,
            "tracking_number": f"VN{idx:06d}" if shipping in SHIPPING_METHODS[:3] else "",
        }
    )

path = Path("data/tickets_seed.csv")
path.parent.mkdir(parents=True, exist_ok=True)
with path.open("w", newline="", encoding="utf-8") as file:
    writer = csv.DictWriter(file, fieldnames=list(rows[0].keys()))
    writer.writeheader()
    writer.writerows(rows)

print(f"Generated {len(rows)} rows -> {path}")
