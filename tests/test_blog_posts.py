"""Blog post CRUD and ownership rules."""

from datetime import datetime, timedelta

import pytest

from conftest import auth_header
from src.errors import ForbiddenError, NotFoundError
from src.models import BlogPost
from src.services import blog_posts as blog_posts_service
from src.services import comments as comments_service


def new_post(db, author, title="Hello", **extra):
    return blog_posts_service.create(db, {"title": title, "content": "Body", **extra}, author.id)


def test_create_post_over_http(client, alice):
    user, token = alice

    response = client.post(
        "/blog-posts",
        json={"title": "First", "content": "Hello world", "image_urls": ["http://img/a.png"]},
        headers=auth_header(token),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["author_id"] == user.id
    assert body["image_urls"] == ["http://img/a.png"]
    assert body["video_urls"] == []
    assert body["author"] == {
        "id": user.id,
        "name": "Alice",
        "surname": "Tester",
        "username": "alice",
        "email": "alice@example.com",
    }


def test_create_post_requires_auth(client):
    response = client.post("/blog-posts", json={"title": "x", "content": "y"})

    assert response.status_code == 401


def test_create_post_rejects_empty_title(client, alice):
    _, token = alice

    response = client.post("/blog-posts", json={"title": " ", "content": "y"}, headers=auth_header(token))

    assert response.status_code == 400


def test_find_all_is_newest_first_with_comment_counts(db, client, alice, bob):
    author, _ = alice
    commenter, _ = bob
    older = new_post(db, author, title="Older")
    newer = new_post(db, author, title="Newer")
    older.created_at = datetime.utcnow() - timedelta(hours=1)
    db.commit()
    comments_service.create(db, "Nice", older.id, commenter.id)
    comments_service.create(db, "Again", older.id, commenter.id)

    response = client.get("/blog-posts")

    assert response.status_code == 200
    posts = response.json()
    assert [p["title"] for p in posts] == ["Newer", "Older"]
    assert [p["comment_count"] for p in posts] == [0, 2]
    assert posts[0]["author"]["username"] == "alice"


def test_find_one_includes_comments_with_authors(db, client, alice, bob):
    author, _ = alice
    commenter, _ = bob
    post = new_post(db, author)
    comments_service.create(db, "First!", post.id, commenter.id)

    response = client.get(f"/blog-posts/{post.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["author"]["username"] == "alice"
    assert len(body["comments"]) == 1
    assert body["comments"][0]["content"] == "First!"
    assert body["comments"][0]["author"]["username"] == "bob"


def test_find_one_missing_post(client):
    response = client.get("/blog-posts/does-not-exist")

    assert response.status_code == 404
    assert response.json()["detail"] == "Blog post not found"


def test_update_by_author(db, client, alice):
    author, token = alice
    post = new_post(db, author)

    response = client.put(f"/blog-posts/{post.id}", json={"title": "Edited"}, headers=auth_header(token))

    assert response.status_code == 200
    assert response.json()["title"] == "Edited"
    assert response.json()["content"] == "Body"


def test_update_by_non_owner_is_forbidden_and_leaves_post_unchanged(db, alice, bob):
    author, _ = alice
    intruder, _ = bob
    post = new_post(db, author)

    with pytest.raises(ForbiddenError):
        blog_posts_service.update(db, post.id, {"title": "Hacked"}, intruder.id)

    db.expire_all()
    assert db.get(BlogPost, post.id).title == "Hello"


def test_missing_post_is_not_found_before_ownership(db, bob):
    intruder, _ = bob

    with pytest.raises(NotFoundError):
        blog_posts_service.update(db, "missing", {"title": "x"}, intruder.id)
    with pytest.raises(NotFoundError):
        blog_posts_service.remove(db, "missing", intruder.id)


def test_delete_by_non_owner_over_http(db, client, alice, bob):
    author, _ = alice
    _, intruder_token = bob
    post = new_post(db, author)

    response = client.delete(f"/blog-posts/{post.id}", headers=auth_header(intruder_token))

    assert response.status_code == 403
    assert response.json()["detail"] == "You can only delete your own posts"
    assert client.get(f"/blog-posts/{post.id}").status_code == 200


def test_delete_post_removes_its_comments(db, client, alice, bob):
    author, token = alice
    commenter, _ = bob
    post = new_post(db, author)
    comments_service.create(db, "Soon gone", post.id, commenter.id)

    response = client.delete(f"/blog-posts/{post.id}", headers=auth_header(token))

    assert response.status_code == 200
    assert response.json() == {"message": "Blog post deleted successfully"}
    assert client.get(f"/comments/post/{post.id}").json() == []


def test_my_posts_lists_only_callers_posts(db, client, alice, bob):
    author, token = alice
    other, _ = bob
    new_post(db, author, title="Mine")
    new_post(db, other, title="Theirs")

    response = client.get("/blog-posts/user/my-posts", headers=auth_header(token))

    assert response.status_code == 200
    assert [p["title"] for p in response.json()] == ["Mine"]
