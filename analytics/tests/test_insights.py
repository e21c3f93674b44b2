"""
Tests for rule-based portfolio insights.
"""

from analytics.insights import generate_portfolio_insights


DEFAULTS = {'concentration_pct': 50, 'performer_move_pct': 10, 'min_assets': 5}


def make_asset(symbol, price, quantity, change):
    return {
        'id': symbol.lower(),
        'symbol': symbol,
        'name': symbol.title(),
        'current_price': price,
        'holding_quantity': quantity,
        'price_change_percentage_24h': change
    }


def balanced_portfolio():
    return [
        make_asset('BTC', 100, 1, 1.0),
        make_asset('ETH', 100, 1, -1.0),
        make_asset('SOL', 100, 1, 2.0),
        make_asset('ADA', 100, 1, 0.5),
        make_asset('DOT', 100, 1, -0.5)
    ]


def ids(insights):
    return [insight['id'] for insight in insights]


class TestGeneratePortfolioInsights:
    """Tests for generate_portfolio_insights."""

    def test_empty_portfolio(self):
        assert generate_portfolio_insights([], DEFAULTS) == []

    def test_balanced_portfolio_has_no_insights(self):
        assert generate_portfolio_insights(balanced_portfolio(), DEFAULTS) == []

    def test_concentration_risk(self):
        assets = balanced_portfolio()
        assets[0]['holding_quantity'] = 10

        insights = generate_portfolio_insights(assets, DEFAULTS)

        assert ids(insights) == ['concentration-risk']
        insight = insights[0]
        assert insight['type'] == 'warning'
        assert insight['confidence'] == 85
        assert insight['impact'] == 'high'
        assert insight['related_assets'] == ['btc']
        # 1000 / 1400
        assert "BTC represents 71.4% of your portfolio" in insight['description']

    def test_top_and_worst_performer(self):
        assets = balanced_portfolio()
        assets[2]['price_change_percentage_24h'] = 15.5
        assets[3]['price_change_percentage_24h'] = -12.25

        insights = generate_portfolio_insights(assets, DEFAULTS)

        assert ids(insights) == ['top-performer', 'worst-performer']
        assert insights[0]['description'].startswith("Sol is up 15.50% today")
        assert insights[0]['related_assets'] == ['sol']
        assert insights[1]['description'].startswith("Ada is down 12.25% today")
        assert insights[1]['type'] == 'warning'

    def test_move_threshold_is_strict(self):
        assets = balanced_portfolio()
        assets[2]['price_change_percentage_24h'] = 10.0
        assets[3]['price_change_percentage_24h'] = -10.0

        assert generate_portfolio_insights(assets, DEFAULTS) == []

    def test_few_assets(self):
        assets = balanced_portfolio()[:4]

        insights = generate_portfolio_insights(assets, DEFAULTS)

        assert ids(insights) == ['diversification-opportunity']
        assert insights[0]['description'].startswith("You have 4 assets")

    def test_major_assets_missing(self):
        assets = balanced_portfolio()[2:]
        assets.append(make_asset('LINK', 100, 1, 0.0))
        assets.append(make_asset('XRP', 100, 1, 0.0))

        insights = generate_portfolio_insights(assets, DEFAULTS)

        assert ids(insights) == ['major-assets-missing']
        assert insights[0]['impact'] == 'low'

    def test_one_major_asset_is_enough(self):
        assets = balanced_portfolio()
        assets[0] = make_asset('LINK', 100, 1, 1.0)

        assert 'major-assets-missing' not in ids(generate_portfolio_insights(assets, DEFAULTS))

    def test_rule_order(self):
        assets = [
            make_asset('SOL', 100, 50, 30.0),
            make_asset('ADA', 1, 10, -20.0)
        ]

        assert ids(generate_portfolio_insights(assets, DEFAULTS)) == [
            'concentration-risk',
            'top-performer',
            'worst-performer',
            'diversification-opportunity',
            'major-assets-missing'
        ]

    def test_thresholds_from_environment(self, monkeypatch):
        monkeypatch.setenv('INSIGHT_MIN_ASSETS', '3')
        monkeypatch.setenv('INSIGHT_CONCENTRATION_PCT', '90')

        assets = balanced_portfolio()[:4]
        assets[0]['holding_quantity'] = 10

        assert generate_portfolio_insights(assets) == []

    def test_explicit_thresholds_override_environment(self, monkeypatch):
        monkeypatch.setenv('INSIGHT_MIN_ASSETS', '3')

        insights = generate_portfolio_insights(balanced_portfolio()[:4], {'min_assets': 10})

        assert ids(insights) == ['diversification-opportunity']

    def test_worthless_portfolio_skips_concentration(self):
        assets = [make_asset(s, 0, 1, 0.0) for s in ['BTC', 'ETH', 'SOL', 'ADA', 'DOT']]

        assert generate_portfolio_insights(assets, DEFAULTS) == []
