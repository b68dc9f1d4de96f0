#!/usr/bin/env python3
"""
Quick Start Guide for simplexml.

Builds an RPC-style envelope, encodes it, parses it back, searches it and
shows how malformed input is reported.
"""

import sys

from simplexml import XMLParser, create_document, elem, parse_string
from simplexml.search import and_, attr, content_exists, find_all, find_first, parent, tag
from simplexml.shared import TooManyRootElementsError, XMLSyntaxError

SOAP = "http://schemas.xmlsoap.org/soap/envelope/"


def build_and_encode_example():
    """Build a tree in memory and encode it."""

    print("🚀 QUICK START - simplexml")
    print("=" * 45)

    print("\n📄 Step 1: Building a document")
    print("-" * 30)

    body = elem("Body", SOAP).add_child(
        elem("GetPrice", "urn:shop").add_children(
            elem("Item", content="Apples").set_attr("id", "", "42"),
            elem("Currency", content="EUR"),
        )
    )
    envelope = elem("Envelope", SOAP).add_child(body)
    document = create_document(envelope)

    print(f"✅ Created document with {len(document.all())} elements")
    print(f"📏 Deepest element depth: {max(e.depth for e in document.all())}")

    print("\n🔄 Step 2: Encoding")
    print("-" * 30)
    print(document)
    return str(document)


def parse_and_search_example(xml_text):
    """Parse encoded output back and query it."""

    print("\n🧭 Step 3: Parsing and searching")
    print("-" * 30)

    document = parse_string(xml_text)
    everything = document.all()

    item = find_first(and_(tag("Item", "urn:shop"), attr("id", "", "42")), everything)
    print(f"📦 Item 42: {item.content if item else None}")

    with_text = find_all(and_(content_exists(), parent(tag("GetPrice", "*"))), everything)
    print(f"📋 Leaf values: {[e.content for e in with_text]}")

    print(f"🔁 Re-encodes identically: {str(document) == xml_text}")


def error_reporting_example():
    """Show how the two kinds of parse failure are reported."""

    print("\n\n🔍 ERROR REPORTING EXAMPLE")
    print("=" * 40)

    try:
        parse_string("<a/><b/>")
    except TooManyRootElementsError as e:
        print(f"❌ {e} ({len(e.elements)} roots parsed)")

    try:
        parse_string("<root>\n  <open>\n</root>")
    except XMLSyntaxError as e:
        print(f"❌ {e}")

    result = XMLParser().check("<root><unclosed></root>")
    print(f"📊 check(): success={result.success}, diagnostics={len(result.diagnostics)}")


def main():
    """Main function."""
    xml_text = build_and_encode_example()
    parse_and_search_example(xml_text)
    error_reporting_example()
    print("\n🎉 Quick start complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
