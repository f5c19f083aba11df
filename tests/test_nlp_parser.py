from app.services.nlp_parser import parse_natural_language_query


def test_full_query_in_euros():
    parsed = parse_natural_language_query("I'm going to Japan for 10 days, budget €25")

    assert parsed.country.code == "JP"
    assert parsed.country.name == "Japan"
    assert parsed.days == 10
    assert parsed.budget == 25.0
    assert parsed.currency == "EUR"


def test_alias_weeks_and_max_budget():
    parsed = parse_natural_language_query("USA, 2 weeks, max 30 dollars")

    assert parsed.country.code == "US"
    assert parsed.days == 14
    assert parsed.budget == 30.0
    assert parsed.currency == "USD"


def test_pound_sign_sets_gbp():
    parsed = parse_natural_language_query("trip to the uk with £15 to spare")

    assert parsed.country.code == "GB"
    assert parsed.budget == 15.0
    assert parsed.currency == "GBP"
    assert parsed.days is None


def test_longest_country_name_wins():
    assert parse_natural_language_query("South Africa safari").country.code == "ZA"
    assert parse_natural_language_query("Australia 5 days").country.code == "AU"


def test_country_names_match_whole_words_only():
    assert parse_natural_language_query("Indiana road trip").country is None
    assert parse_natural_language_query("chilean wine tour").country is None
    assert parse_natural_language_query("visiting Chile, then Peru").country.code == "CL"


def test_uppercase_iso_code_matches():
    assert parse_natural_language_query("Heading to FR soon").country.code == "FR"


def test_lowercase_two_letter_words_are_not_codes():
    assert parse_natural_language_query("is it worth going in winter").country is None


def test_day_count_is_not_a_budget():
    parsed = parse_natural_language_query("need data for up to 20 days")

    assert parsed.days == 20
    assert parsed.budget is None


def test_currency_code_after_amount():
    parsed = parse_natural_language_query("Canada 7 day trip 40 cad")

    assert parsed.country.code == "CA"
    assert parsed.days == 7
    assert parsed.budget == 40.0
    assert parsed.currency == "CAD"


def test_budget_phrase_with_currency_word():
    parsed = parse_natural_language_query("budget of 30 cad")

    assert parsed.budget == 30.0
    assert parsed.currency == "CAD"


def test_out_of_range_values_are_dropped():
    parsed = parse_natural_language_query("400 days with $20000")

    assert parsed.days is None
    assert parsed.budget is None
    assert parsed.currency == "USD"


def test_empty_query():
    parsed = parse_natural_language_query("")

    assert parsed.country is None
    assert parsed.days is None
    assert parsed.budget is None
    assert parsed.currency == "USD"
