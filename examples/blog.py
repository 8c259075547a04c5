"""Blog operations used by the examples.

Load them into the CLI with ``-m blog`` from this directory:

    cd examples
    operant list -m blog
    operant run posts.create -m blog --data '{"title": "Hi", "body": "hello"}'
    operant run posts.create -m blog --file post.xml --call
"""

from operant import (
    Contract,
    MemoryStore,
    Operation,
    Property,
    Schema,
    exclusion,
    inclusion,
    length,
    presence,
    register_operation,
)

posts = MemoryStore("posts")
comments = MemoryStore("comments")


class PostContract(Contract):
    schema = Schema(
        [
            Property("title", str, rules=[presence(), length(maximum=80)], description="Headline"),
            Property("body", str, rules=[presence()]),
            Property("slug", str, rules=[exclusion(["new", "edit"])]),
            Property("status", str, rules=[inclusion(["draft", "published"])], default="draft"),
            Property("tags", list, default=[]),
        ],
        description="A blog post.",
        examples=["operant run posts.create -m blog -d '{\"title\": \"Hi\", \"body\": \"hello\"}'"],
    )


class CommentContract(Contract):
    schema = Schema(
        [
            Property("post_id", int, rules=[presence()], key="postId"),
            Property("text", str, rules=[presence(), length(maximum=500)]),
        ]
    )


@register_operation()
class CreatePost(Operation):
    name = "posts.create"
    description = "Create a post"
    contract = PostContract
    models = posts

    def execute(self, payload, contracts):
        return self.validate(payload, contracts.find_or_new(), lambda contract: contract.save() and contract)


class UpdatePostContract(PostContract):
    schema = PostContract.schema.extend(Property("id", int, rules=[presence()]))


@register_operation()
class UpdatePost(Operation):
    name = "posts.update"
    description = "Update an existing post"
    contract = UpdatePostContract
    models = posts

    def execute(self, payload, contracts):
        # without a usable id the new record fails on "id" and is never saved
        post_id = contracts.lookup(payload, "id")
        post = contracts.find_or_new(post_id)
        return self.validate(payload, post, lambda contract: contract.save() and contract)


@register_operation()
class AddComment(Operation):
    name = "comments.add"
    description = "Comment on a post"
    contract = CommentContract
    models = comments

    def execute(self, payload, contracts):
        contract = contracts(contracts.find_or_new())
        if contract.validate(payload):
            # raises RecordNotFoundError for an unknown post
            posts.find_or_new(contract.post_id)
            contract.save()
        return contract


@register_operation()
class PublishWithComment(Operation):
    """Create a post and its first comment; the nested call raises on bad input."""

    name = "posts.publish_with_comment"
    description = "Create a published post with a first comment"
    contract = PostContract
    models = posts

    def execute(self, payload, contracts):
        contract = contracts(contracts.find_or_new())
        if contract.validate(payload):
            contract.model.status = "published"
            contract.save()
            comment = contracts.decode(payload).get("comment", "")
            AddComment.call({"postId": contract.model.id, "text": comment})
        return contract

