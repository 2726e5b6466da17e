from sui_tft.tft import main

if __name__ == "__main__":
    # mint_player -> transfer to admin
    main(health=None)
