import pytest

from ngram_lm import web


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(web, "model", None)
    web.app.config['TESTING'] = True
    with web.app.test_client() as client:
        yield client


def test_no_model(client):
    assert client.get('/api/status').get_json() == {'has_model': False, 'max_order': None}
    assert client.get('/api/model/info').status_code == 400
    assert client.get('/api/ngrams').status_code == 400


def test_build_and_inspect(client, corpus):
    response = client.post('/api/build', json={'sentences': corpus, 'n': 2})
    assert response.status_code == 200
    assert response.get_json()['stats']['total_1_grams'] == 10

    assert client.get('/api/status').get_json() == {'has_model': True, 'max_order': 2}

    ngrams = client.get('/api/ngrams?order=2&k=2').get_json()
    assert ngrams['ngrams'] == [
        {'ngram': '<s> the', 'count': 2, 'probability': '1', 'log2_probability': '0'},
        {'ngram': 'sat </s>', 'count': 2, 'probability': '1', 'log2_probability': '0'},
    ]

    text = client.get('/api/model.lm').get_data(as_text=True)
    assert text.startswith("\\data\\\n1-grams: unique=6; total=10\n")
    assert text.endswith("\\end\\")


def test_build_with_vocabulary(client, corpus):
    response = client.post('/api/build', json={
        'sentences': corpus, 'n': 2, 'delta': 1, 'vocabulary': ['fox'],
    })
    assert response.status_code == 200

    info = client.get('/api/model/info').get_json()
    assert info['stats']['unique_1_grams'] == 7
    assert info['closing'] == {'1': 1, '2': 7}


def test_bad_requests(client, corpus):
    assert client.post('/api/build', json={'sentences': []}).status_code == 400
    assert client.post('/api/build', json={'sentences': corpus, 'n': 0}).status_code == 400
    assert client.post('/api/build', json={'sentences': corpus, 'delta': -1}).status_code == 400
    assert client.post('/api/build', json={'sentences': [1, 2]}).status_code == 400
    assert client.post('/api/build', json={'sentences': 'the cat'}).status_code == 400
    assert client.post('/api/build', json={'sentences': corpus, 'vocabulary': 'fox'}).status_code == 400
    assert client.post('/api/build', json=["the cat"]).status_code == 400

    client.post('/api/build', json={'sentences': corpus, 'n': 2})
    assert client.get('/api/ngrams?order=3').status_code == 400


def test_named_smoothing(client, corpus):
    response = client.post('/api/build', json={'sentences': corpus, 'n': 1, 'smoothing': 'laplace'})
    assert response.get_json()['stats']['delta'] == 1.0

    bad = client.post('/api/build', json={'sentences': corpus, 'smoothing': 'kneser_ney'})
    assert bad.status_code == 400
