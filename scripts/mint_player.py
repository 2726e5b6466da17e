from sui_tft.tft import DEFAULT_HEALTH, main

if __name__ == "__main__":
    # mint_player -> update_health -> transfer to admin
    main(health=DEFAULT_HEALTH)
