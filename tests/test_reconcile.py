"""Tests for recomputing recommendation counters."""

import sys

import recount_recommendations
from boycott_api.app.core.config import settings


def _count(client, product_id):
    return client.get(f"/products/{product_id}").json()["recommendationCount"]


def test_reconcile_repairs_drift(client, db, make_product, make_recommendation):
    drifted = make_product()
    correct = make_product(productName="Gadget")
    make_recommendation(drifted)
    make_recommendation(drifted, recommenderEmail="c@x.com")
    make_recommendation(correct)
    db.execute("UPDATE products SET recommendation_count = 7 WHERE id = ?", (drifted,))
    db.commit()

    resp = client.post("/products/reconcile")
    assert resp.status_code == 200
    assert resp.json()["matchedCount"] == 2
    assert resp.json()["modifiedCount"] == 1
    assert _count(client, drifted) == 2
    assert _count(client, correct) == 1


def test_reconcile_consistent_store_is_noop(client, make_product, make_recommendation):
    product_id = make_product()
    make_recommendation(product_id)
    resp = client.post("/products/reconcile")
    assert resp.json()["modifiedCount"] == 0
    assert _count(client, product_id) == 1


def test_recount_script_dry_run_and_fix(client, db, make_product, capsys, monkeypatch):
    product_id = make_product()
    db.execute("UPDATE products SET recommendation_count = 3 WHERE id = ?", (product_id,))
    db.commit()
    db_path = settings.database_url

    assert recount_recommendations.count_drift(db_path) == 1

    monkeypatch.setattr(sys, "argv", ["recount_recommendations.py", "--db", db_path, "--dry-run"])
    recount_recommendations.main()
    assert "1 product(s)" in capsys.readouterr().out
    assert _count(client, product_id) == 3

    monkeypatch.setattr(sys, "argv", ["recount_recommendations.py", "--db", db_path])
    recount_recommendations.main()
    assert "corrected 1" in capsys.readouterr().out
    assert _count(client, product_id) == 0
