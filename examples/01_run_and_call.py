#!/usr/bin/env python3
"""Run and Call - the two invocation protocols.

This example invokes the same Operation through the flow protocol, which
returns the Contract and branches with a success continuation, and the
call protocol, which raises ValidationError for invalid input.

Run: python examples/01_run_and_call.py
"""
from blog import CreatePost, PublishWithComment, posts

from operant import Document, ValidationError
from operant.framework.logging import configure_logging


def main():
    configure_logging(level="WARNING")

    print("=" * 60)
    print("Run and Call")
    print("=" * 60)

    # === 1. Flow protocol, valid payload ===
    print("\n[1] run() with a valid form payload")
    contract = CreatePost.run(
        {"title": "Hello", "body": "First post"},
        on_success=lambda c: print(f"  redirect to /posts/{c.model.id}"),
    )
    print(f"  valid={contract.valid} status={contract.status}")

    # === 2. Flow protocol, invalid payload ===
    print("\n[2] run() with a blank body")
    contract = CreatePost.run({"title": "Hello", "body": ""}, on_success=lambda c: print("  never printed"))
    print(f"  valid={contract.valid}")
    for message in contract.errors.full_messages():
        print(f"  re-render form: {message}")

    # === 3. Call protocol ===
    print("\n[3] call() with a blank body")
    try:
        CreatePost.call({"title": "Hello", "body": ""})
    except ValidationError as e:
        print(f"  ValidationError: {e.errors}")

    # === 4. Serialized payloads ===
    print("\n[4] Same schema, other formats")
    for payload in (
        '{"title": "From JSON", "body": "text"}',
        Document.xml("<post><title>From XML</title><body>text</body><tags>a</tags><tags>b</tags></post>"),
        Document.yaml("title: From YAML\nbody: text\n"),
        '{"title": ',
    ):
        contract = CreatePost.run(payload)
        print(f"  valid={contract.valid} title={contract.title!r} errors={contract.errors.to_dict()}")

    # === 5. Nested operations ===
    print("\n[5] Nested call propagates the inner failure")
    try:
        PublishWithComment.run({"title": "Nested", "body": "text", "comment": ""})
    except ValidationError as e:
        print(f"  inner {type(e.contract).__name__} failed: {e.errors}")
    print(f"  posts stored: {len(posts)}")


if __name__ == "__main__":
    main()
