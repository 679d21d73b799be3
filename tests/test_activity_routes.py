from athlyze.utils import advisor as texts
from conftest import days_ago


def log_activity(client, **overrides):
    form = {
        'activity_type': 'exercise',
        'description': 'Morning run',
        'activity_date': days_ago(0),
        'calories': '300',
    }
    form.update(overrides)
    return client.post('/activities', data=form)


def test_new_activity_form(auth_client):
    response = auth_client.get('/activities/new')
    assert response.status_code == 200
    assert days_ago(0).encode() in response.data


def test_create_activity_stores_measurements_and_advice(auth_client, app_db, user_id):
    response = log_activity(auth_client, duration='45', distance='8.5', weight='80')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/activities')

    activity = app_db.list_activities(user_id)[0]
    assert activity['description'] == 'Morning run'
    assert activity['calories'] == 300
    assert activity['measurements'] == {'duration': '45', 'distance': '8.5'}

    newest = app_db.list_suggestions(user_id)[0]
    assert newest['text'] == texts.FIRST_EXERCISE
    assert newest['suggestion_type'] == 'exercise'

    page = auth_client.get('/activities')
    assert b'Activity logged successfully' in page.data
    assert b'Morning run' in page.data


def test_high_calorie_meal_advice(auth_client, app_db, user_id):
    log_activity(auth_client, activity_type='nutrition', description='Pizza night', calories='900')
    assert app_db.list_suggestions(user_id)[0]['text'] == texts.HIGH_CALORIE_MEAL_TEXT


def test_create_activity_validation(auth_client, app_db, user_id):
    response = log_activity(auth_client, description='ab', calories='9000')
    assert response.status_code == 200
    assert b'Description must be at least 3 characters long' in response.data
    assert b'Calories must be a number between 0 and 5000' in response.data
    assert app_db.count_activities(user_id) == 0


def test_list_filters_and_pagination(auth_client, app_db, user_id):
    for i in range(11):
        app_db.add_activity(user_id, 'exercise', f'Workout {i:02d}', days_ago(i))
    app_db.add_activity(user_id, 'nutrition', 'Salad bowl', days_ago(0), 350)

    page_one = auth_client.get('/activities')
    assert b'Activities (12)' in page_one.data
    assert b'Salad bowl' in page_one.data
    assert b'Workout 08' in page_one.data
    assert b'Workout 09' not in page_one.data

    page_two = auth_client.get('/activities?page=2')
    assert b'Workout 09' in page_two.data
    assert b'Workout 10' in page_two.data

    meals = auth_client.get('/activities?type=nutrition')
    assert b'Activities (1)' in meals.data
    assert b'Salad bowl' in meals.data

    ranged = auth_client.get(f'/activities?date_from={days_ago(2)}&date_to={days_ago(1)}')
    assert b'Activities (2)' in ranged.data

    invalid_page = auth_client.get('/activities?page=abc')
    assert invalid_page.status_code == 200


def test_detail_and_delete(auth_client, app_db, user_id):
    activity_id = app_db.add_activity(user_id, 'measurements', 'Weigh-in', days_ago(0), None, {'weight': '80.0'})

    response = auth_client.get(f'/activities/{activity_id}')
    assert response.status_code == 200
    assert b'Weigh-in' in response.data
    assert b'80' in response.data

    response = auth_client.post(f'/activities/{activity_id}/delete')
    assert response.status_code == 302
    assert app_db.get_activity(activity_id, user_id) is None

    assert auth_client.get(f'/activities/{activity_id}').status_code == 404
    assert auth_client.post(f'/activities/{activity_id}/delete').status_code == 404


def test_cannot_see_other_users_activity(client, app_db):
    other = app_db.create_user('Bob', 'bob@example.com', 'hash')
    activity_id = app_db.add_activity(other['user_id'], 'exercise', 'Secret run', days_ago(0))

    client.post('/register', data={
        'name': 'Ana', 'email': 'ana@example.com', 'password': 'secret123', 'confirm_password': 'secret123',
    })
    assert client.get(f'/activities/{activity_id}').status_code == 404
    assert client.post(f'/activities/{activity_id}/delete').status_code == 404
    assert app_db.get_activity(activity_id, other['user_id']) is not None


def test_huge_page_number_falls_back_to_first_page(auth_client, app_db, user_id):
    app_db.add_activity(user_id, 'exercise', 'Evening swim', days_ago(0))
    response = auth_client.get('/activities?page=99999999999999999999')
    assert response.status_code == 200
    assert b'Evening swim' in response.data
