import voltgate


def test_flags():
    badges = voltgate.UserBadges()
    assert badges.value == 0

    badges.founder = True
    assert badges.founder is True
    assert badges.value == 16

    badges.founder = False
    assert badges.founder is False
    assert badges.value == 0

    badges = voltgate.UserBadges(founder=True, developer=True)
    assert badges.value == 17
    assert voltgate.UserBadges.developer in badges


def test_user_projection_segments_are_isolated():
    flags = voltgate.UserProjectionFlags.build(badges=0b101, flags=0b11, online=True)
    assert flags.online is True
    assert flags.badges.value == 0b101
    assert flags.flags.value == 0b11

    flags.update_badges(0b010)
    assert flags.badges.value == 0b010
    assert flags.flags.value == 0b11
    assert flags.online is True

    flags.update_flags(0b100)
    assert flags.badges.value == 0b010
    assert flags.flags.value == 0b100
    assert flags.online is True

    flags.online = False
    assert flags.badges.value == 0b010
    assert flags.flags.value == 0b100


def test_user_projection_ignores_out_of_range_bits():
    flags = voltgate.UserProjectionFlags.build(online=True)
    flags.update_badges(0xFFFFFFFF)
    assert flags.badges.value == voltgate.USER_BADGES_MASK
    assert flags.flags.value == 0
    assert flags.online is True


def test_badge_patch_leaves_online_and_flags():
    user = voltgate.OptimizedUser(
        id='01HZ0000000000000000000000',
        name='alice',
        discriminator='0001',
        flags=voltgate.UserProjectionFlags.build(badges=1, flags=4, online=True),
    )

    user.locally_update(voltgate.PartialUser(id=user.id, raw_badges=256))
    assert user.online is True
    assert user.flags.flags.banned is True
    assert user.badges.early_adopter is True
    assert user.badges.developer is False


def test_channel_projection_bits():
    flags = voltgate.ChannelProjectionFlags(active=True)
    flags.nsfw = True
    assert flags.active and flags.nsfw

    flags.nsfw = False
    assert flags.active is True
    assert flags.value == 1


def test_server_and_role_projection_bits():
    server = voltgate.ServerProjectionFlags(analytics=True, discoverable=True)
    server.nsfw = True
    server.analytics = False
    assert server.discoverable is True
    assert server.nsfw is True
    assert server.analytics is False

    role = voltgate.RoleProjectionFlags()
    assert role.hoist is False
    role.hoist = True
    assert role.value == 1


def test_flag_operators():
    a = voltgate.EmojiProjectionFlags(animated=True)
    b = voltgate.EmojiProjectionFlags(nsfw=True)
    assert (a | b).value == 3
    assert (a & b).value == 0
    assert voltgate.EmojiProjectionFlags.all().value == 3
    assert voltgate.EmojiProjectionFlags.none().value == 0


def test_flag_descriptor_keeps_function_docs():
    descriptor = voltgate.UserBadges.developer
    assert isinstance(descriptor, voltgate.flags.flag)
    assert descriptor.name == 'developer'
    assert descriptor.value == 1
    assert descriptor.__doc__ == ':class:`bool`: Whether user is platform developer.'
