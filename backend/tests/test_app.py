def test_healthz(client):
    res = client.get("/healthz")
    assert res.status_code == 200
    assert res.json() == {"ok": True}


def test_metrics_count_issued_tokens(client):
    assert client.get("/getAfrToken", params={"tenantId": "acme"}).status_code == 200
    assert client.get("/getAfrToken").status_code == 400

    for path in ("/metrics", "/metrics/"):
        res = client.get(path)
        assert res.status_code == 200
        body = res.text
        assert 'tokenbroker_tokens_issued_total{endpoint="getAfrToken"}' in body
        assert 'reason="missing_tenant"' in body
        assert 'path="/getAfrToken"' in body


def test_unknown_route_is_plain_text(client):
    res = client.get("/nope")
    assert res.status_code == 404
    assert res.text == "Not Found"
    assert res.headers["content-type"].startswith("text/plain")


def test_unsupported_method(client):
    res = client.delete("/getAfrToken")
    assert res.status_code == 405
