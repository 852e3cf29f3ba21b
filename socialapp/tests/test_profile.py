import pytest

from socialapp.config import UploadLimits
from socialapp.errors import ValidationError
from socialapp.services import profile as profile_service
from socialapp.storage import ImageUpload


PNG = b'\x89PNG\r\n\x1a\n' + b'\x00' * 64


@pytest.mark.asyncio
async def test_update_profile_trims_and_saves(client, make_user, auth_headers, default_picture_url):
    penny = await make_user('penny')

    res = await client.put('/profile', json={'displayName': '  Penny P ', 'bio': ' hello there  '},
                           headers=auth_headers(penny))
    assert res.status_code == 200, res.text
    assert res.json() == {'status': 200}

    res = await client.get(f'/profile/{penny.id}', headers=auth_headers(penny))
    assert res.status_code == 200, res.text
    assert res.json() == {'displayName': 'Penny P', 'bio': 'hello there', 'picture': default_picture_url}


@pytest.mark.asyncio
@pytest.mark.parametrize('display_name', ['', '   ', 'x' * 21])
async def test_update_profile_rejects_display_name_length(client, make_user, auth_headers, display_name):
    penny = await make_user('penny')

    res = await client.put('/profile', json={'displayName': display_name, 'bio': ''},
                           headers=auth_headers(penny))
    assert res.status_code == 400
    assert res.json()['error'] == 'Display name must be between 1 and 20 characters long.'


@pytest.mark.asyncio
@pytest.mark.parametrize('bio', ['', 'fine bio', 'x' * 191])
async def test_update_profile_taken_name_conflicts_whatever_the_bio(client, make_user, auth_headers, bio):
    penny = await make_user('penny')
    await make_user('alice')

    res = await client.put('/profile', json={'displayName': 'alice', 'bio': bio}, headers=auth_headers(penny))
    assert res.status_code == 400
    assert res.json()['error'] == 'Display name already exists.'


@pytest.mark.asyncio
async def test_update_profile_can_keep_own_display_name(client, make_user, auth_headers, load_profile):
    penny = await make_user('penny')

    res = await client.put('/profile', json={'displayName': 'penny', 'bio': 'new bio'}, headers=auth_headers(penny))
    assert res.status_code == 200, res.text
    profile = await load_profile(penny)
    assert profile.bio == 'new bio'


@pytest.mark.asyncio
async def test_update_profile_name_taken_concurrently_conflicts(client, make_user, auth_headers, load_profile,
                                                             monkeypatch):
    penny = await make_user('penny')
    await make_user('alice')

    async def _no_owner(session, display_name):
        return None
    # the lookup misses, as if alice took the name after the check ran
    monkeypatch.setattr(profile_service, 'get_profile_by_display_name', _no_owner)

    res = await client.put('/profile', json={'displayName': 'alice', 'bio': ''}, headers=auth_headers(penny))
    assert res.status_code == 400
    assert res.json()['error'] == 'Display name already exists.'
    profile = await load_profile(penny)
    assert profile.display_name == 'penny'


@pytest.mark.asyncio
async def test_update_profile_rejects_long_bio(client, make_user, auth_headers, load_profile):
    penny = await make_user('penny')

    res = await client.put('/profile', json={'displayName': 'Penny', 'bio': 'x' * 191}, headers=auth_headers(penny))
    assert res.status_code == 400
    assert res.json()['error'] == 'Bio must not exceed 190 characters.'
    profile = await load_profile(penny)
    assert profile.display_name == 'penny'


@pytest.mark.asyncio
async def test_update_profile_requires_auth(client):
    res = await client.put('/profile', json={'displayName': 'Penny', 'bio': ''})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_update_picture_requires_file(client, make_user, auth_headers, store):
    penny = await make_user('penny')

    res = await client.put('/profile/picture', headers=auth_headers(penny))
    assert res.status_code == 400
    assert res.json()['error'] == 'Invalid file value.'
    assert store.uploads == []


@pytest.mark.asyncio
@pytest.mark.parametrize('filename,data,content_type', [
    ('anim.gif', b'GIF89a', 'image/gif'),
    ('notes.txt', b'hello', 'text/plain'),
    ('huge.png', b'0' * (5 * 1024 * 1024 + 1), 'image/png'),
])
async def test_update_picture_rejects_invalid_files(client, make_user, auth_headers, store, load_profile,
                                                    filename, data, content_type):
    penny = await make_user('penny')

    res = await client.put('/profile/picture', files={'picture': (filename, data, content_type)},
                           headers=auth_headers(penny))
    assert res.status_code == 400
    assert res.json()['error'] == 'Invalid file value.'
    assert store.uploads == []
    profile = await load_profile(penny)
    assert profile.default_picture is True


@pytest.mark.asyncio
@pytest.mark.parametrize('content_type', ['image/avif', 'image/jpeg', 'image/png', 'image/svg+xml', 'image/webp'])
async def test_update_picture_then_get_profile(client, make_user, auth_headers, store, load_profile, content_type):
    penny = await make_user('penny')

    res = await client.put('/profile/picture', files={'picture': ('me.img', PNG, content_type)},
                           headers=auth_headers(penny))
    assert res.status_code == 200, res.text
    assert res.json() == {'status': 200}
    assert store.uploads == [f'profile-pictures/{penny.id}']
    assert store.objects[f'profile-pictures/{penny.id}'] == PNG

    profile = await load_profile(penny)
    assert profile.default_picture is False

    res = await client.get(f'/profile/{penny.id}', headers=auth_headers(penny))
    assert res.json()['picture'] == f'https://images.test/profile-pictures/{penny.id}'


@pytest.mark.asyncio
async def test_update_picture_rolls_back_flag_when_upload_fails(make_user, store, load_profile):
    penny = await make_user('penny')
    store.fail_uploads = True

    with pytest.raises(RuntimeError):
        await profile_service.update_picture(penny.id, ImageUpload('image/png', PNG), store, UploadLimits())

    profile = await load_profile(penny)
    assert profile.default_picture is True


@pytest.mark.asyncio
async def test_update_picture_honours_configured_limits(make_user, store, load_profile):
    penny = await make_user('penny')
    limits = UploadLimits(max_bytes=10)

    with pytest.raises(ValidationError):
        await profile_service.update_picture(penny.id, ImageUpload('image/png', PNG), store, limits)
    assert store.uploads == []


@pytest.mark.asyncio
async def test_delete_picture_twice(client, make_user, auth_headers, store, load_profile):
    penny = await make_user('penny')
    await client.put('/profile/picture', files={'picture': ('me.png', PNG, 'image/png')},
                     headers=auth_headers(penny))

    res = await client.delete('/profile/picture', headers=auth_headers(penny))
    assert res.status_code == 200, res.text
    assert res.json() == {'status': 200}
    assert store.deletes == [f'profile-pictures/{penny.id}']
    profile = await load_profile(penny)
    assert profile.default_picture is True

    res = await client.delete('/profile/picture', headers=auth_headers(penny))
    assert res.status_code == 400
    assert res.json()['error'] == 'Profile picture is already the default.'
    assert len(store.deletes) == 1


@pytest.mark.asyncio
async def test_delete_picture_on_default_conflicts(client, make_user, auth_headers, store):
    penny = await make_user('penny')

    res = await client.delete('/profile/picture', headers=auth_headers(penny))
    assert res.status_code == 400
    assert res.json()['error'] == 'Profile picture is already the default.'
    assert store.deletes == []


@pytest.mark.asyncio
async def test_get_profile_rejects_bad_ids(client, make_user, auth_headers):
    penny = await make_user('penny')

    res = await client.get('/profile/asd', headers=auth_headers(penny))
    assert res.status_code == 400
    assert res.json()['error'] == 'Parameter must be a number.'

    res = await client.get('/profile/9999', headers=auth_headers(penny))
    assert res.status_code == 400
    assert res.json()['error'] == 'User not found.'

    res = await client.get('/profile/99999999999999999999', headers=auth_headers(penny))
    assert res.status_code == 400
    assert res.json()['error'] == 'User not found.'


@pytest.mark.asyncio
@pytest.mark.parametrize('target', ['1_0', '+5', '\u0661\u0662'])
async def test_get_profile_rejects_ids_that_are_not_plain_digits(client, make_user, auth_headers, target):
    penny = await make_user('penny')

    res = await client.get(f'/profile/{target}', headers=auth_headers(penny))
    assert res.status_code == 400
    assert res.json()['error'] == 'Parameter must be a number.'


@pytest.mark.asyncio
async def test_get_profile_mutual_friends(client, make_user, auth_headers, befriend):
    penny = await make_user('penny')
    alice = await make_user('alice')
    carol = await make_user('carol')
    dave = await make_user('dave')
    erin = await make_user('erin')
    await befriend(penny, carol)
    await befriend(alice, carol)
    await befriend(penny, dave)
    await befriend(alice, erin)

    res = await client.get(f'/profile/{alice.id}', headers=auth_headers(penny))
    assert res.status_code == 200, res.text
    assert res.json()['mutualFriends'] == [{'id': carol.id, 'displayName': 'carol'}]


@pytest.mark.asyncio
async def test_get_profile_stranger_without_mutuals_gets_empty_list(client, make_user, auth_headers):
    penny = await make_user('penny')
    alice = await make_user('alice')

    res = await client.get(f'/profile/{alice.id}', headers=auth_headers(penny))
    assert res.json()['mutualFriends'] == []


@pytest.mark.asyncio
async def test_get_profile_omits_mutuals_for_self_and_friends(client, make_user, auth_headers, befriend):
    penny = await make_user('penny')
    alice = await make_user('alice')
    carol = await make_user('carol')
    await befriend(penny, carol)
    await befriend(alice, carol)

    res = await client.get(f'/profile/{penny.id}', headers=auth_headers(penny))
    assert 'mutualFriends' not in res.json()

    await befriend(penny, alice)
    res = await client.get(f'/profile/{alice.id}', headers=auth_headers(penny))
    assert res.status_code == 200, res.text
    assert 'mutualFriends' not in res.json()
