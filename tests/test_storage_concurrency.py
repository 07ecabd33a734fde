from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from roommatch.errors import DuplicateUsernameError
from roommatch.schemas.profile import UserProfileUpdate
from roommatch.services import conversation_service as svc
from roommatch.services.profile_service import save_user_profile


T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_concurrent_first_sends_share_one_conversation(storage) -> None:
    a = storage.create_user("alice", "hashed").id
    b = storage.create_user("bruno", "hashed").id
    senders = 8
    barrier = threading.Barrier(senders)

    def send(n: int) -> None:
        sender, receiver = (a, b) if n % 2 == 0 else (b, a)
        barrier.wait()
        svc.send_message(storage, sender, receiver, f"hello {n}", now=T0 + timedelta(seconds=n))

    with ThreadPoolExecutor(max_workers=senders) as pool:
        for future in [pool.submit(send, n) for n in range(senders)]:
            future.result()

    conversations = storage.list_user_conversations(a)
    assert len(conversations) == 1
    assert storage.list_user_conversations(b) == conversations
    assert conversations[0].unread_count == senders
    assert len(svc.list_messages(storage, conversations[0].id)) == senders


def test_concurrent_registrations_keep_usernames_unique(storage) -> None:
    attempts = 6
    barrier = threading.Barrier(attempts)

    def register() -> str:
        barrier.wait()
        try:
            storage.create_user("same-name", "hashed")
        except DuplicateUsernameError:
            return "taken"
        return "created"

    with ThreadPoolExecutor(max_workers=attempts) as pool:
        outcomes = [future.result() for future in [pool.submit(register) for _ in range(attempts)]]

    assert outcomes.count("created") == 1
    assert outcomes.count("taken") == attempts - 1
    assert storage.get_user_by_username("same-name") is not None


def test_create_user_rejects_existing_username(storage) -> None:
    storage.create_user("dup", "hashed")
    with pytest.raises(DuplicateUsernameError) as excinfo:
        storage.create_user("dup", "other-hash")
    assert excinfo.value.detail == "Username already registered"


def test_reads_during_writes_do_not_fail(memory_storage) -> None:
    a = memory_storage.create_user("reader", "hashed").id
    b = memory_storage.create_user("writer", "hashed").id
    save_user_profile(memory_storage, a, UserProfileUpdate(full_name="Reader"))
    for n in range(5000):
        memory_storage.append_message(b, a, f"backlog {n}", now=T0)
    conversation = memory_storage.get_conversation(a, b)

    stop = threading.Event()
    errors: list[BaseException] = []

    def write() -> None:
        n = 0
        while not stop.is_set():
            n += 1
            svc.send_message(memory_storage, b, a, f"live {n}", now=T0 + timedelta(seconds=n))
            other = memory_storage.create_user(f"extra{n}", "hashed").id
            save_user_profile(memory_storage, other, UserProfileUpdate(full_name=f"Extra {n}"))
            svc.resolve_conversation(memory_storage, a, other)

    writer = threading.Thread(target=write)
    writer.start()
    try:
        for _ in range(200):
            try:
                svc.list_messages(memory_storage, conversation.id)
                svc.list_conversations(memory_storage, a)
                memory_storage.list_profiles()
                memory_storage.get_user_by_username("reader")
            except RuntimeError as exc:
                errors.append(exc)
    finally:
        stop.set()
        writer.join()

    assert errors == []
