from wealthmap.services.scoring import score_liquidity, score_market, score_risk


def test_market_score_rewards_population_and_income():
    base = {"propertyType": "residential"}
    rich = {
        "propertyType": "residential",
        "location": {"cityInfo": {"population": 800000}, "countyInfo": {"medianIncome": 120000}},
    }
    assert score_market(rich, 150) > score_market(base, 150)


def test_market_score_type_bonus_ordering():
    assert score_market({"propertyType": "commercial"}, 150) > score_market({"propertyType": "land"}, 150)


def test_market_price_term_is_capped():
    assert score_market({}, 0) == 58
    assert score_market({}, -50) == score_market({}, -1000) == 60
    assert score_market({}, 10_000) == 40


def test_liquidity_monotonicity_in_size():
    small = score_liquidity({"propertyType": "residential", "squareFootage": 1200}, as_of_year=2024)
    large = score_liquidity({"propertyType": "residential", "squareFootage": 6000}, as_of_year=2024)
    assert small > large


def test_liquidity_urban_premium():
    rural = {"propertyType": "industrial", "location": {"cityInfo": {"population": 20000}}}
    urban = {"propertyType": "industrial", "location": {"cityInfo": {"population": 250000}}}
    assert score_liquidity(urban, as_of_year=2024) - score_liquidity(rural, as_of_year=2024) == 15


def test_risk_does_not_decrease_with_age_past_fifty():
    prop = {"propertyType": "residential", "currentValue": 300000}
    assert score_risk(prop, 60, 50) >= score_risk(prop, 40, 50)
    assert score_risk(prop, 40, 50) >= score_risk(prop, 20, 50)


def test_risk_value_bands_and_unknown_type():
    modest = score_risk({"propertyType": "residential", "currentValue": 500000}, 20, 100)
    high = score_risk({"propertyType": "residential", "currentValue": 2_000_000}, 20, 100)
    very_high = score_risk({"propertyType": "residential", "currentValue": 6_000_000}, 20, 100)
    assert (modest, high, very_high) == (30, 40, 55)
    assert score_risk({"propertyType": "houseboat"}, 20, 100) == 45
