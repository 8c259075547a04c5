#!/usr/bin/env python3
"""Background Dispatch - handing (identifier, payload) to a worker pool.

The dispatcher never sees an Operation instance. It resolves the registered
identifier and invokes a fresh one on a worker thread, recording the outcome
instead of raising it.

Run: python examples/02_background_dispatch.py
"""
from blog import posts

from operant.framework.dispatcher import ExecutionStatus, OperationDispatcher
from operant.framework.logging import configure_logging


def main():
    configure_logging(level="WARNING")

    print("=" * 60)
    print("Background Dispatch")
    print("=" * 60)

    dispatcher = OperationDispatcher(backend="thread")
    try:
        print("\n[1] Submit work")
        executions = [
            dispatcher.submit("posts.create", {"title": f"Post {i}", "body": "text" if i % 3 else ""})
            for i in range(6)
        ]
        executions.append(dispatcher.submit("comments.add", {"postId": 999, "text": "orphan"}))

        print("\n[2] Wait for results")
        for execution in executions:
            dispatcher.wait(execution.id, timeout=10)
            print(f"  {execution.operation:<14} {execution.status.value:<10} {execution.errors or execution.error or ''}")

        print("\n[3] Query")
        invalid = dispatcher.list_executions(status=ExecutionStatus.INVALID)
        print(f"  invalid executions: {len(invalid)}")
        print(f"  posts stored: {len(posts)}")
    finally:
        dispatcher.shutdown()


if __name__ == "__main__":
    main()
