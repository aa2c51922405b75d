import requests

from page_analyzer.probe import count_inaccessible_links, probe_link


def test_probe_link_threshold(fake_web):
    fake_web.add("https://ok.example/", 200)
    fake_web.add("https://moved.example/", 301)
    fake_web.add("https://edge.example/", 399)
    fake_web.add("https://gone.example/", 404)
    fake_web.add("https://broken.example/", 503)

    assert probe_link("https://ok.example/") is True
    assert probe_link("https://moved.example/") is True
    assert probe_link("https://edge.example/") is False
    assert probe_link("https://gone.example/") is False
    assert probe_link("https://broken.example/") is False


def test_transport_failure_counts_as_inaccessible(fake_web):
    fake_web.fail("https://down.example/")
    fake_web.fail("https://slow.example/", requests.Timeout("timed out"))

    assert probe_link("https://down.example/") is False
    assert probe_link("https://slow.example/") is False


def test_count_inaccessible_links_probes_every_link(fake_web):
    links = [f"https://site{i}.example/" for i in range(25)]
    for i, link in enumerate(links):
        fake_web.add(link, 404 if i % 5 == 0 else 200)
    fake_web.fail(links[1])

    assert count_inaccessible_links(links, max_workers=4) == 6
    assert sorted(fake_web.requested) == sorted(links)


def test_count_is_independent_of_worker_count(fake_web):
    links = [f"https://site{i}.example/" for i in range(12)]
    for i, link in enumerate(links):
        fake_web.add(link, 500 if i % 3 == 0 else 200)

    counts = {count_inaccessible_links(links, max_workers=workers) for workers in (1, 3, 12)}
    assert counts == {4}


def test_no_links_means_no_requests(fake_web):
    assert count_inaccessible_links([]) == 0
    assert fake_web.requested == []


def test_non_positive_worker_counts_fall_back_to_one(fake_web, monkeypatch):
    links = ["https://a.example/", "https://b.example/"]
    fake_web.add(links[0], 404)

    assert count_inaccessible_links(links, max_workers=-3) == 1

    monkeypatch.setattr("page_analyzer.probe.PROBE_MAX_WORKERS", -2)
    assert count_inaccessible_links(links) == 1
