from __future__ import annotations

import threading

from soulbounds.core import IdentityIsNotUnique, InMemorySoulRegistry


def _account(i: int) -> str:
    return "0x" + f"{i:040x}"


def test_concurrent_mints_of_one_identity_have_a_single_winner() -> None:
    reg = InMemorySoulRegistry()
    barrier = threading.Barrier(16)
    wins: list[int] = []
    losses: list[int] = []
    lock = threading.Lock()

    def _mint(i: int) -> None:
        barrier.wait()
        try:
            reg.mint(_account(i), "contested", "https://x")
        except IdentityIsNotUnique:
            with lock:
                losses.append(i)
        else:
            with lock:
                wins.append(i)

    threads = [threading.Thread(target=_mint, args=(i,)) for i in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(wins) == 1
    assert len(losses) == 15
    assert reg.list_souls() == [_account(wins[0])]
    assert reg.account_of_identity("contested") == _account(wins[0])


def test_concurrent_metadata_writes_all_land() -> None:
    reg = InMemorySoulRegistry()
    acc = _account(1)
    reg.mint(acc, "id", "https://x")
    for i in range(8):
        reg.allow_metadata_key(f"k{i}")

    def _write(i: int) -> None:
        for n in range(50):
            reg.set_metadata(acc, f"k{i}", str(n))

    threads = [threading.Thread(target=_write, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    _, keys, values = reg.get_soul(acc, True)
    assert len(keys) == 8
    assert values == [b"49"] * 8
    assert reg.soul_info(acc).revision == 1 + 8 * 50


def test_subscribers_see_concurrent_writes_in_seq_order() -> None:
    reg = InMemorySoulRegistry()
    acc = _account(2)
    reg.mint(acc, "ordered", "https://x")
    for i in range(8):
        reg.allow_metadata_key(f"o{i}")

    seqs: list[int] = []
    reg.subscribe(lambda e: seqs.append(e.seq))
    barrier = threading.Barrier(8)

    def _write(i: int) -> None:
        barrier.wait()
        for n in range(50):
            reg.set_metadata(acc, f"o{i}", str(n))

    threads = [threading.Thread(target=_write, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(seqs) == 8 * 50
    assert seqs == sorted(seqs)
    assert seqs[-1] == reg.events()[-1].seq
