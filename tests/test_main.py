import main


def test_main_connects_and_closes(monkeypatch, store, fake_pool):
    closed = []
    monkeypatch.setattr(main, "get_datastore", lambda: store)
    monkeypatch.setattr(main, "close_datastore", lambda: closed.append(True))

    main.main()

    assert store.is_ready
    assert fake_pool.tables == ["account", "game", "stream"]
    assert closed == [True]
