# import_from_csv.py
import argparse
import csv
import logging
import os
import re
from urllib.parse import urljoin

import requests
from dotenv import load_dotenv

from database import SQLiteProductStore, StoreError, create_database
from routers.products import ProductRequestError, validate_create_payload

"""
Usage examples:
1) Direct DB insert:
   python import_from_csv.py --file products.csv --mode db

2) POST to running API:
   python import_from_csv.py --file products.csv --mode api --base-url http://127.0.0.1:8000
"""

logger = logging.getLogger(__name__)

_ID_RE = re.compile(r"[+-]?[0-9]+")


def _clean_price(raw):
    return raw.replace("€", "").replace("$", "").replace(",", "").strip()


def parse_row(row):
    """Turn a CSV row into a product dict, or None if it can't be one."""
    fields = {k.strip().lower(): (v or "").strip() for k, v in row.items() if isinstance(k, str)}
    name = fields.get("name") or fields.get("product") or ""
    try:
        raw_id = fields.get("id", "")
        if not _ID_RE.fullmatch(raw_id):
            return None
        product_id = int(raw_id)
        price = float(_clean_price(fields.get("price", "")))
    except ValueError:
        return None
    try:
        product = validate_create_payload({"id": product_id, "name": name, "price": price})
    except ProductRequestError:
        return None
    if not product.name:
        return None
    return product.model_dump()


def read_products(csv_path):
    with open(csv_path, newline='', encoding='utf-8') as fh:
        for r in csv.DictReader(fh):
            obj = parse_row(r)
            if obj is None:
                logger.warning("Skipping row: %s", r)
                continue
            yield obj


def insert_direct(csv_path, db_file=None):
    create_database(db_file)
    store = SQLiteProductStore(db_file)
    count = 0
    for obj in read_products(csv_path):
        try:
            store.insert(validate_create_payload(obj))
        except StoreError as e:
            print("Failed:", e, "payload:", obj)
            continue
        count += 1
    print(f"Inserted {count} rows into DB.")
    return count


def post_to_api(csv_path, base_url):
    endpoint = urljoin(base_url.rstrip("/") + "/", "products")
    headers = {"Content-Type": "application/json"}
    count = 0
    for payload in read_products(csv_path):
        resp = requests.post(endpoint, json=payload, headers=headers, timeout=10)
        if resp.status_code == 201:
            count += 1
        else:
            print("Failed:", resp.status_code, resp.text, "payload:", payload)
    print(f"Posted {count} products to API.")
    return count


def main(argv=None):
    load_dotenv()
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    parser = argparse.ArgumentParser(description="Import products (id,name,price) from a CSV file")
    parser.add_argument("--file", "-f", required=True, help="CSV file with id, name and price columns")
    parser.add_argument("--mode", choices=("db", "api"), default="db", help="db = write sqlite directly, api = POST to running API")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:8000"), help="API base url")
    parser.add_argument("--db-file", default=os.getenv("DB_FILE"), help="sqlite file (for db mode)")
    args = parser.parse_args(argv)

    if args.mode == "db":
        insert_direct(args.file, args.db_file)
    else:
        post_to_api(args.file, args.base_url)


if __name__ == "__main__":
    main()
